"""
Configuration for scoring, embeddings and batch limits.

Values are layered: built-in defaults, then an optional YAML file, then
environment variables.
"""
import logging
import os
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


DEFAULT_SKILL_VOCABULARY = [
    'React', 'Vue.js', 'Angular', 'JavaScript', 'TypeScript', 'Node.js',
    'Python', 'Java', 'PHP', 'HTML', 'CSS', 'SQL', 'MySQL', 'PostgreSQL',
    'AWS', 'Docker', 'Git', 'MongoDB', 'Express', 'Spring', 'Django',
    'jQuery', 'Bootstrap', 'Jenkins',
    'Kubernetes', 'Redis', 'GraphQL', 'REST API', 'Microservices',
]

DEFAULT_STOP_WORDS = [
    'with', 'have', 'been', 'will', 'this', 'that', 'they', 'them', 'their',
]

# Keys a YAML file may set directly; the weight tables are merged instead
SCALAR_KEYS = (
    'skill_vocabulary', 'stop_words',
    'embedding_backend', 'embedding_model', 'embedding_dimension',
    'embedding_increment', 'embedding_batch_size',
    'max_workers', 'max_files', 'max_file_size_mb',
    'per_file_timeout', 'overall_timeout',
)
WEIGHT_KEYS = ('ats_weights', 'overall_weights')

# (variable, attribute, parser)
ENV_OVERRIDES: Tuple[Tuple[str, str, Callable[[str], Any]], ...] = (
    ('EMBEDDING_BACKEND', 'embedding_backend', str),
    ('EMBEDDING_MODEL', 'embedding_model', str),
    ('MAX_FILES', 'max_files', int),
    ('MAX_FILE_SIZE_MB', 'max_file_size_mb', int),
    ('MAX_WORKERS', 'max_workers', int),
    ('PER_FILE_TIMEOUT', 'per_file_timeout', float),
)


class Config:
    """Application configuration."""

    def __init__(self, config_path: Optional[str] = "config.yaml"):
        """
        Args:
            config_path: YAML file to read when it exists; None skips the file
        """
        self.skill_vocabulary: List[str] = list(DEFAULT_SKILL_VOCABULARY)
        self.stop_words: List[str] = list(DEFAULT_STOP_WORDS)
        self.ats_weights: Dict[str, float] = {
            'skills': 0.4,
            'experience': 0.3,
            'education': 0.15,
            'keywords': 0.15,
        }
        self.overall_weights: Dict[str, float] = {'ats': 0.7, 'semantic': 0.3}

        self.embedding_backend = "hash"
        self.embedding_model = "sentence-transformers/all-MiniLM-L6-v2"
        self.embedding_dimension = 1536
        self.embedding_increment = 0.1
        self.embedding_batch_size = 16

        self.max_workers = 4
        self.max_files = 50
        self.max_file_size_mb = 10
        self.per_file_timeout = 30
        self.overall_timeout = 300

        if config_path and os.path.exists(config_path):
            self._load_file(config_path)
        else:
            logger.info("Using default configuration")

        self._load_from_env()

    def _load_file(self, config_path: str) -> None:
        try:
            with open(config_path, 'r') as f:
                self._load_from_dict(yaml.safe_load(f))
            logger.info(f"Configuration loaded from {config_path}")
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {config_path}: {str(e)}")

    def _load_from_dict(self, config_data: Optional[dict]) -> None:
        if not config_data:
            return

        for key in SCALAR_KEYS:
            if key in config_data:
                setattr(self, key, config_data[key])

        for key in WEIGHT_KEYS:
            setattr(self, key, {**getattr(self, key), **(config_data.get(key) or {})})

    def _load_from_env(self) -> None:
        for variable, attribute, parse in ENV_OVERRIDES:
            value = os.getenv(variable)
            if value:
                setattr(self, attribute, parse(value))
