"""
fxpack - 模块化 Web 应用的模块包与发布包打包工具

Packages application modules into versioned ZIP archives with a
change-detection manifest, and assembles release archives.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config.schema import PackagerSettings
from .build.module_packager import ModulePackager
from .build.release_packager import ReleasePackager

__all__ = ["PackagerSettings", "ModulePackager", "ReleasePackager", "__version__"]
