"""
配置加载器

负责从 YAML 文件加载打包器设置，以及从 package.json 读取并验证模块/应用元数据。
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .schema import AppPackageMetadata, ModulePackageMetadata, PackagerSettings

PACKAGE_METADATA_FILE = "package.json"

_MetadataT = TypeVar("_MetadataT", bound=BaseModel)


class ConfigError(Exception):
    """配置错误基类"""
    pass


class ConfigValidationError(ConfigError):
    """配置验证错误"""

    def __init__(self, message: str, errors: List[Dict[str, Any]]):
        super().__init__(message)
        self.errors = errors

    def __str__(self) -> str:
        base = super().__str__()
        details = self.format_errors()
        return f"{base}\n{details}" if details else base

    def format_errors(self) -> str:
        """格式化错误信息为人类可读的格式"""
        formatted = []
        for error in self.errors:
            loc = " -> ".join(str(item) for item in error.get('loc', []))
            msg = error.get('msg', '未知错误')
            if loc:
                formatted.append(f"字段 '{loc}': {msg}")
            else:
                formatted.append(f"根级别: {msg}")
        return "\n".join(formatted)

    def format_errors_json(self) -> str:
        """格式化错误信息为 JSON 格式"""
        return json.dumps(self.errors, ensure_ascii=False, indent=2, default=str)


class ConfigLoader:
    """配置加载器"""

    # 需要相对于设置文件所在目录解析的字段
    PATH_FIELDS = ("app_root", "modules_dir", "dist_dir", "tmp_dir")

    def __init__(self):
        self.yaml = YAML(typ="safe")

    def load_settings(
        self,
        config_path: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> PackagerSettings:
        """加载打包器设置

        Args:
            config_path: YAML 设置文件路径（可选）
            overrides: 命令行覆盖项，值为 None 的项被忽略

        Returns:
            PackagerSettings: 验证后的设置实例

        Raises:
            ConfigError: 设置文件读取或验证错误
        """
        data: Dict[str, Any] = {}

        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.is_file():
                raise ConfigError(f"设置文件不存在: {config_path}")
            if config_path.suffix.lower() not in ('.yaml', '.yml'):
                raise ConfigError(f"设置文件必须是 .yaml 或 .yml 格式: {config_path}")

            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    raw_data = self.yaml.load(f)
            except YAMLError as e:
                raise ConfigError(f"YAML 解析错误: {e}") from e
            except OSError as e:
                raise ConfigError(f"文件读取错误: {e}") from e

            if raw_data is not None:
                if not isinstance(raw_data, dict):
                    raise ConfigError("设置文件根级别必须是对象/字典格式")
                data = dict(raw_data)
                self._resolve_relative_paths(data, config_path.parent)

        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value

        try:
            return PackagerSettings.from_dict(data)
        except ValidationError as e:
            raise ConfigValidationError("设置验证失败", e.errors()) from e

    def load_module_metadata(self, module_root: Union[str, Path]) -> ModulePackageMetadata:
        """读取模块 package.json"""
        return self._load_metadata(Path(module_root) / PACKAGE_METADATA_FILE, ModulePackageMetadata)

    def load_app_metadata(self, app_root: Union[str, Path]) -> AppPackageMetadata:
        """读取应用根 package.json"""
        return self._load_metadata(Path(app_root) / PACKAGE_METADATA_FILE, AppPackageMetadata)

    def _load_metadata(self, metadata_path: Path, model: Type[_MetadataT]) -> _MetadataT:
        if not metadata_path.is_file():
            raise ConfigError(f"元数据文件不存在: {metadata_path}")

        try:
            with open(metadata_path, 'r', encoding='utf-8') as f:
                raw_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"JSON 解析错误 {metadata_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"文件读取错误 {metadata_path}: {e}") from e

        if not isinstance(raw_data, dict):
            raise ConfigError(f"元数据根级别必须是对象: {metadata_path}")

        try:
            return model.model_validate(raw_data)
        except ValidationError as e:
            raise ConfigValidationError(f"元数据验证失败: {metadata_path}", e.errors()) from e

    def _resolve_relative_paths(self, data: Dict[str, Any], base_path: Path) -> None:
        """将设置中的相对路径解析为相对于设置文件所在目录"""
        for field in self.PATH_FIELDS:
            value = data.get(field)
            if isinstance(value, str) and value and not Path(value).is_absolute():
                data[field] = str((base_path / value).resolve())


# 全局加载器实例
config_loader = ConfigLoader()


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> PackagerSettings:
    """便捷函数：加载打包器设置"""
    return config_loader.load_settings(config_path, overrides)


def load_module_metadata(module_root: Union[str, Path]) -> ModulePackageMetadata:
    """便捷函数：读取模块元数据"""
    return config_loader.load_module_metadata(module_root)


def load_app_metadata(app_root: Union[str, Path]) -> AppPackageMetadata:
    """便捷函数：读取应用元数据"""
    return config_loader.load_app_metadata(app_root)
