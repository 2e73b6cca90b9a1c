"""
命令行接口单元测试

使用 typer 的 CliRunner 测试 module/release/inspect/validate 命令。
"""

import json

from typer.testing import CliRunner

from fxpack import __version__
from fxpack.cli.commands.inspect import check_manifest_consistency
from fxpack.cli.main import app

runner = CliRunner()


def _last_line(output: str) -> str:
    return [line for line in output.splitlines() if line.strip()][-1].strip()


class TestMainApp:
    """主入口测试"""

    def test_version(self):
        """测试显示版本"""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help(self):
        """测试帮助信息列出全部命令"""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("module", "release", "inspect", "validate"):
            assert command in result.output


class TestModuleCommand:
    """module 命令测试"""

    def test_module_success(self, app_root):
        """测试打包成功时最后一行输出产物路径"""
        result = runner.invoke(app, ["module", "A", "--app-root", str(app_root)])

        assert result.exit_code == 0, result.output
        expected = (app_root / "build" / "dist" / "A-1.0.0.zip").resolve()
        assert _last_line(result.output) == str(expected)
        assert expected.is_file()

    def test_module_custom_dist(self, app_root, tmp_path):
        """测试指定产物目录"""
        dist = tmp_path / "out"
        result = runner.invoke(app, ["module", "B", "--app-root", str(app_root), "--dist-dir", str(dist)])

        assert result.exit_code == 0, result.output
        assert (dist / "B-1.1.0.zip").is_file()

    def test_module_missing(self, app_root):
        """测试模块不存在时退出码为 1"""
        result = runner.invoke(app, ["module", "Nope", "--app-root", str(app_root)])
        assert result.exit_code == 1

    def test_module_invalid_metadata(self, app_root, module_factory):
        """测试元数据无效时退出码为 1"""
        module_factory("NoVer", None, {"x.php": "x"})
        result = runner.invoke(app, ["module", "NoVer", "--app-root", str(app_root)])
        assert result.exit_code == 1

    def test_module_bad_config_file(self, app_root, tmp_path):
        """测试设置文件格式错误"""
        config = tmp_path / "fxpack.txt"
        config.write_text("app_root: .\n", encoding="utf-8")

        result = runner.invoke(app, ["module", "A", "--config", str(config)])
        assert result.exit_code == 1

    def test_module_with_config_file(self, app_root, tmp_path):
        """测试通过设置文件指定应用根目录"""
        config = tmp_path / "fxpack.yaml"
        config.write_text("app_root: app\ncompress_level: 9\n", encoding="utf-8")

        result = runner.invoke(app, ["module", "A", "--config", str(config)])

        assert result.exit_code == 0, result.output
        assert _last_line(result.output).endswith("A-1.0.0.zip")


class TestReleaseCommand:
    """release 命令测试"""

    def test_release_missing_metadata(self, app_root):
        """测试应用元数据缺失时退出码为 1"""
        (app_root / "package.json").unlink()
        result = runner.invoke(app, ["release", "--app-root", str(app_root)])
        assert result.exit_code == 1
        assert not (app_root / "build" / "dist").exists()

    def test_release_module_failure_names_module(self, app_root):
        """测试模块子进程失败时报告失败模块并且不生成发布归档"""
        (app_root / "modules" / "B" / "package.json").write_text(json.dumps({"name": "b"}), encoding="utf-8")

        result = runner.invoke(app, ["release", "--app-root", str(app_root)])

        assert result.exit_code == 1
        assert "模块 B 失败" in result.output
        assert "version" in result.output
        assert not (app_root / "build" / "dist" / "release-2.0.0.zip").exists()


class TestInspectCommand:
    """inspect 命令测试"""

    def _module_archive(self, app_root):
        result = runner.invoke(app, ["module", "B", "--app-root", str(app_root)])
        assert result.exit_code == 0, result.output
        return app_root / "build" / "dist" / "B-1.1.0.zip"

    def test_inspect_json(self, app_root):
        """测试 JSON 输出"""
        archive = self._module_archive(app_root)

        result = runner.invoke(app, ["inspect", str(archive), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output[result.output.index("{"):])
        assert data["kind"] == "module"
        assert data["problems"] == []
        assert "src/b.php" in data["manifest"]

    def test_inspect_table(self, app_root):
        """测试表格输出"""
        archive = self._module_archive(app_root)
        result = runner.invoke(app, ["inspect", str(archive), "--members"])
        assert result.exit_code == 0, result.output

    def test_inspect_missing_archive(self, tmp_path):
        """测试归档不存在"""
        result = runner.invoke(app, ["inspect", str(tmp_path / "missing.zip")])
        assert result.exit_code == 1


class TestValidateCommand:
    """validate 命令测试"""

    def test_validate_app(self, app_root):
        """测试验证应用元数据"""
        result = runner.invoke(app, ["validate", "--app-root", str(app_root)])
        assert result.exit_code == 0, result.output

    def test_validate_module(self, app_root):
        """测试验证模块元数据"""
        result = runner.invoke(app, ["validate", "A", "--app-root", str(app_root)])
        assert result.exit_code == 0, result.output

    def test_validate_module_invalid_pattern(self, app_root, module_factory):
        """测试模块排除模式无效"""
        module_factory("BadRe", "1.0.0", {}, exclude=[r"^/(unclosed"])
        result = runner.invoke(app, ["validate", "BadRe", "--app-root", str(app_root)])
        assert result.exit_code == 1

    def test_validate_json_errors(self, app_root):
        """测试 JSON 格式错误输出"""
        (app_root / "package.json").write_text(json.dumps({"version": "1.0.0"}), encoding="utf-8")

        result = runner.invoke(app, ["validate", "--app-root", str(app_root), "--json"])

        assert result.exit_code == 1
        data = json.loads(result.output[result.output.index("{"):])
        assert data["error_count"] >= 1


class TestManifestConsistency:
    """清单一致性检查测试"""

    def test_module_manifest_consistent(self):
        """测试模块清单与成员一致"""
        members = ["src", "src/a.php", "filelist.json"]
        assert check_manifest_consistency(members, {"src": None, "src/a.php": "0000abcd"}) == []

    def test_module_manifest_mismatch(self):
        """测试模块清单缺少成员或多出条目"""
        problems = check_manifest_consistency(["a.php", "b.php", "filelist.json"], {"a.php": "1", "c.php": "2"})
        assert any("c.php" in p for p in problems)
        assert any("b.php" in p for p in problems)

    def test_release_manifest(self):
        """测试发布清单中的名称都必须是成员"""
        members = ["logs", "modules", "modules/A.zip", "modules/C", "filelist.json"]
        assert check_manifest_consistency(members, ["logs", "modules", "modules/A.zip"]) == []
        assert check_manifest_consistency(members, ["index.php"]) != []

    def test_missing_manifest(self):
        """测试归档缺少清单"""
        assert check_manifest_consistency(["a.php"], None)
