"""支持 `python -m fxpack` 调用"""

from .cli.main import app

if __name__ == "__main__":
    app(prog_name="fxpack")
