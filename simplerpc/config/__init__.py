"""Configuration module for simplerpc."""

from simplerpc.config.loader import get_config_path, load_config, save_config
from simplerpc.config.schema import RpcAuthConfig, RpcConfig

__all__ = ["RpcConfig", "RpcAuthConfig", "load_config", "save_config", "get_config_path"]
