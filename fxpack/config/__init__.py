"""配置和 Schema 模块

提供打包器设置（YAML）与 package.json 元数据的加载和验证功能。
"""

from .schema import AppPackageMetadata, ModulePackageMetadata, PackagerSettings
from .loader import (
    ConfigLoader,
    ConfigValidationError,
    ConfigError,
    PACKAGE_METADATA_FILE,
    load_settings,
    load_module_metadata,
    load_app_metadata,
    config_loader,
)

__all__ = [
    # 模型
    "PackagerSettings",
    "ModulePackageMetadata",
    "AppPackageMetadata",
    "ConfigLoader",

    # 异常类
    "ConfigError",
    "ConfigValidationError",

    # 便捷函数
    "PACKAGE_METADATA_FILE",
    "load_settings",
    "load_module_metadata",
    "load_app_metadata",

    # 单例
    "config_loader",
]
