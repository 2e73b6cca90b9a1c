"""
配置 Schema 定义

使用 Pydantic 定义打包器设置与 package.json 元数据模型，支持验证和类型检查。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ReleaseOptionsModel(BaseModel):
    """模块发布选项（package.json -> framelix.release）"""
    exclude: List[str] = Field(default_factory=list, description="附加排除模式（正则表达式）")

    model_config = ConfigDict(extra="ignore")


class ModuleFramelixModel(BaseModel):
    """模块 package.json 中的 framelix 段"""
    release: ReleaseOptionsModel = Field(default_factory=ReleaseOptionsModel, description="发布选项")

    model_config = ConfigDict(extra="ignore")


class AppFramelixModel(BaseModel):
    """应用根 package.json 中的 framelix 段"""
    built_in_modules: List[str] = Field(..., alias="builtInModules", description="内置模块列表（有序）")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator('built_in_modules')
    @classmethod
    def validate_module_names(cls, v: List[str]) -> List[str]:
        """模块名不能为空且不能包含路径分隔符"""
        for name in v:
            if not name or not name.strip():
                raise ValueError("模块名不能为空")
            if '/' in name or '\\' in name or name in ('.', '..'):
                raise ValueError(f"无效的模块名: {name}")
        return v


class ModulePackageMetadata(BaseModel):
    """模块 package.json 元数据"""
    version: str = Field(..., description="模块版本号", min_length=1)
    framelix: ModuleFramelixModel = Field(default_factory=ModuleFramelixModel, description="framelix 配置段")

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @property
    def release_exclude(self) -> List[str]:
        """模块声明的附加排除模式"""
        return list(self.framelix.release.exclude)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ModulePackageMetadata':
        return cls.model_validate(data)


class AppPackageMetadata(BaseModel):
    """应用根 package.json 元数据"""
    version: str = Field(..., description="应用版本号", min_length=1)
    framelix: AppFramelixModel = Field(..., description="framelix 配置段")

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @property
    def built_in_modules(self) -> List[str]:
        return list(self.framelix.built_in_modules)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AppPackageMetadata':
        return cls.model_validate(data)


class PackagerSettings(BaseModel):
    """打包器设置

    进程启动时构造一次，显式传递给各打包器。
    未指定的目录按 app_root 推导。
    """
    app_root: Path = Field(default_factory=Path.cwd, description="应用根目录")
    modules_dir: Optional[Path] = Field(None, description="模块目录，默认 <app_root>/modules")
    dist_dir: Optional[Path] = Field(None, description="产物输出目录，默认 <app_root>/build/dist")
    tmp_dir: Optional[Path] = Field(None, description="临时目录，默认 <app_root>/tmp")
    include_extra_modules: bool = Field(True, description="发布包是否原样包含非内置模块目录")
    compress_level: int = Field(6, description="ZIP 压缩级别", ge=0, le=9)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode='after')
    def fill_default_directories(self) -> 'PackagerSettings':
        """按 app_root 补全未指定的目录"""
        root = Path(self.app_root)
        if self.modules_dir is None:
            self.modules_dir = root / "modules"
        if self.dist_dir is None:
            self.dist_dir = root / "build" / "dist"
        if self.tmp_dir is None:
            self.tmp_dir = root / "tmp"
        return self

    def module_root(self, module_name: str) -> Path:
        """模块源码根目录"""
        return Path(self.modules_dir) / module_name

    def to_cli_args(self) -> List[str]:
        """转换为子进程命令行参数"""
        return [
            "--app-root", str(self.app_root),
            "--modules-dir", str(self.modules_dir),
            "--dist-dir", str(self.dist_dir),
            "--tmp-dir", str(self.tmp_dir),
            "--compress-level", str(self.compress_level),
        ]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PackagerSettings':
        return cls.model_validate(data)
