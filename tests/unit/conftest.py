"""
测试共享夹具

构造最小的应用目录树：根 package.json、logs、.htaccess、index.php 与若干模块。
"""

import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from fxpack.config.schema import PackagerSettings


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def make_module(
    modules_dir: Path,
    name: str,
    version: Optional[str] = "1.0.0",
    files: Optional[Dict[str, str]] = None,
    exclude: Optional[List[str]] = None,
) -> Path:
    """创建模块目录及其 package.json"""
    module_root = modules_dir / name
    module_root.mkdir(parents=True, exist_ok=True)

    metadata: Dict[str, object] = {"name": name.lower()}
    if version is not None:
        metadata["version"] = version
    if exclude is not None:
        metadata["framelix"] = {"release": {"exclude": exclude}}
    write_json(module_root / "package.json", metadata)

    for relative, content in (files or {}).items():
        target = module_root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return module_root


@pytest.fixture
def app_root(tmp_path) -> Path:
    """应用根目录，内置模块 A、B"""
    root = tmp_path / "app"
    root.mkdir()
    write_json(root / "package.json", {"version": "2.0.0", "framelix": {"builtInModules": ["A", "B"]}})
    (root / "logs").mkdir()
    (root / ".htaccess").write_text("Deny from all\n", encoding="utf-8")
    (root / "index.php").write_text("<?php\n", encoding="utf-8")
    make_module(root / "modules", "A", "1.0.0", {"a.php": "A"})
    make_module(root / "modules", "B", "1.1.0", {"src/b.php": "B"})
    return root


@pytest.fixture
def settings(app_root) -> PackagerSettings:
    return PackagerSettings(app_root=app_root)


@pytest.fixture
def module_factory(app_root):
    """在 <app_root>/modules 下创建模块"""
    def factory(name: str, version: Optional[str] = "1.0.0", files=None, exclude=None) -> Path:
        return make_module(app_root / "modules", name, version, files, exclude)
    return factory
