"""
模块打包子进程执行器

发布打包时每个内置模块在独立子进程中打包，保证每次模块构建都从干净的进程状态开始。
子进程按顺序执行并等待，不并行。
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional, Protocol

import fxpack
from ..config.schema import PackagerSettings
from ..utils.logging import OutputLevel, debug, get_log_level, LogStage
from .build_context import SubprocessBuildError


class ModuleRunner(Protocol):
    """模块打包执行器协议：打包指定模块并返回产物路径"""

    def __call__(self, module_name: str, settings: PackagerSettings) -> Path:
        ...


class SubprocessModuleRunner:
    """通过 `python -m fxpack module <name>` 打包模块"""

    def __init__(self, python_executable: Optional[str] = None, timeout: Optional[float] = None):
        self.python_executable = python_executable or sys.executable
        self.timeout = timeout

    def build_command(self, module_name: str, settings: PackagerSettings) -> List[str]:
        command = [self.python_executable, "-m", "fxpack"]
        if get_log_level() == OutputLevel.DEBUG:
            command.append("--verbose")
        command += ["module", module_name] + settings.to_cli_args()
        return command

    def _child_env(self) -> dict:
        # 子进程导入与父进程相同位置的 fxpack
        env = dict(os.environ)
        package_parent = str(Path(fxpack.__file__).resolve().parent.parent)
        existing = env.get("PYTHONPATH")
        env["PYTHONPATH"] = package_parent + (os.pathsep + existing if existing else "")
        env["PYTHONIOENCODING"] = "utf-8"
        return env

    def __call__(self, module_name: str, settings: PackagerSettings) -> Path:
        command = self.build_command(module_name, settings)
        debug(f"执行: {' '.join(command)}", stage=LogStage.MODULE)

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self._child_env(),
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise SubprocessBuildError(module_name, f"子进程超时 ({self.timeout}s)", output=str(e.stderr or "")) from e
        except OSError as e:
            raise SubprocessBuildError(module_name, f"无法启动子进程: {e}") from e

        stderr = (result.stderr or "").strip()
        if result.returncode != 0:
            raise SubprocessBuildError(
                module_name,
                f"子进程退出码 {result.returncode}\n{stderr}".rstrip(),
                returncode=result.returncode,
                output=stderr,
            )

        lines = [line.strip() for line in (result.stdout or "").splitlines() if line.strip()]
        if not lines:
            raise SubprocessBuildError(module_name, f"子进程未输出产物路径\n{stderr}".rstrip(),
                                       returncode=result.returncode, output=stderr)

        archive_path = Path(lines[-1])
        if not archive_path.is_file():
            raise SubprocessBuildError(module_name, f"子进程输出的产物不存在: {archive_path}",
                                       returncode=result.returncode, output=result.stdout)
        return archive_path
