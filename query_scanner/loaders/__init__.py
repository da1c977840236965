from .json_loader import JsonLoader
from .yaml_loader import YamlLoader

__all__ = ["JsonLoader", "YamlLoader"]
