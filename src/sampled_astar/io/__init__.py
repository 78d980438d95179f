"""Import classes and definitions used for input/output or user interfaces."""

from .logging import console as console
from .logging import logger as logger
from .yaml_utils import load_yaml_mapping as load_yaml_mapping
