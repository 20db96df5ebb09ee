from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Runs ``main()`` in-process and verifies console output, configuration
precedence and the mapping of service errors to exit codes.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from deploykit.domain.abi_models import AbiGenerationResult, CompileFailure
from deploykit.domain.errors import TraversalIOError
from deploykit.infra.logging import shutdown_logging
from deploykit.interface.cli.app import main
from deploykit.utils.i18n import i18n


@pytest.fixture(autouse=True)
def restore_locale():
    yield
    if i18n.locale != "en":
        i18n.load_locale("en")


@pytest.fixture
def project(make_tree, monkeypatch) -> Path:
    root = make_tree({
        "src/a.ts": 'import { x } from "./b";\nconsole.log(x);\n',
        "src/b.ts": "export const x = 1;\n",
        "scripts/config/shibuyaConfig.py": "config = {'chainId': 81, 'privateKey': '0xabc'}\n",
    })
    monkeypatch.chdir(root)
    return root


# -----------------------------------------------------------------------------
# COPY-DEPS
# -----------------------------------------------------------------------------

def test_copy_deps_prints_progress_and_completion(project: Path, capsys) -> None:
    code = main(["copy-deps", "-i", "src/a.ts", "-o", "out", "--source-root", "src"])

    out = capsys.readouterr().out.splitlines()
    assert code == 0
    assert out == [
        "Copied [Depth 0]: a.ts",
        "Copied [Depth 1]: b.ts",
        "Dependencies copying completed!",
    ]
    assert (project / "out" / "b.ts").exists()


def test_copy_deps_missing_input_exits_with_precondition_code(project: Path, capsys) -> None:
    code = main(["copy-deps", "-i", "src/missing.ts", "-o", "out"])

    captured = capsys.readouterr()
    assert code == 2
    assert "Start file does not exist" in captured.err
    assert not (project / "out").exists()


def test_copy_deps_io_failure_exits_with_one(project: Path, capsys) -> None:
    err = TraversalIOError("src/a.ts", PermissionError("denied"))
    with patch("deploykit.interface.cli.app.copy_closure", side_effect=err):
        code = main(["copy-deps", "-i", "src/a.ts"])

    assert code == 1
    assert "denied" in capsys.readouterr().err


def test_copy_deps_json_output(project: Path, capsys) -> None:
    code = main(["--json", "copy-deps", "-i", "src/a.ts", "-o", "out", "--source-root", "src"])

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert [c["rel_path"] for c in payload["copied"]] == ["a.ts", "b.ts"]
    assert [c["depth"] for c in payload["copied"]] == [0, 1]
    assert payload["max_depth"] == 5


def test_project_config_file_supplies_defaults(project: Path, capsys) -> None:
    (project / "deploykit.json").write_text(
        json.dumps({"max_depth": 0, "output_dir": "from_file"}), encoding="utf-8"
    )

    code = main(["copy-deps", "-i", "src/a.ts", "--source-root", "src"])

    assert code == 0
    assert (project / "from_file" / "a.ts").exists()
    assert not (project / "from_file" / "b.ts").exists()


def test_cli_flags_override_project_config(project: Path) -> None:
    (project / "deploykit.json").write_text(json.dumps({"max_depth": 0}), encoding="utf-8")

    main(["copy-deps", "-i", "src/a.ts", "-o", "out", "--max-depth", "1", "--source-root", "src"])

    assert (project / "out" / "b.ts").exists()


def test_keyboard_interrupt_exits_with_130(project: Path, capsys) -> None:
    with patch("deploykit.interface.cli.app.copy_closure", side_effect=KeyboardInterrupt):
        code = main(["copy-deps", "-i", "src/a.ts"])

    assert code == 130
    assert "Interrupted" in capsys.readouterr().err


# -----------------------------------------------------------------------------
# COPY-CONFIG
# -----------------------------------------------------------------------------

def test_copy_config_writes_json_without_secret(project: Path, capsys) -> None:
    code = main(["copy-config", "-i", "scripts/config/shibuyaConfig.py", "-o", "src/main"])

    out = capsys.readouterr().out
    written = project / "src" / "main" / "shibuyaConfig.json"
    assert code == 0
    assert json.loads(written.read_text(encoding="utf-8")) == {"chainId": 81}
    assert "privateKey" in out
    assert str(written) in out


def test_copy_config_missing_file_exits_with_precondition_code(project: Path, capsys) -> None:
    code = main(["copy-config", "-i", "scripts/config/none.py"])

    assert code == 2
    assert "Config file does not exist" in capsys.readouterr().err


def test_copy_config_import_error_exits_with_one(project: Path, capsys) -> None:
    (project / "broken.py").write_text("raise ImportError('no ethers')\n", encoding="utf-8")

    code = main(["copy-config", "-i", "broken.py"])

    assert code == 1
    assert "no ethers" in capsys.readouterr().err


def test_locale_switch_translates_messages(project: Path, capsys) -> None:
    code = main(["--lang", "zh", "copy-config", "-i", "scripts/config/shibuyaConfig.py", "-o", "out"])

    assert code == 0
    assert "配置已写入" in capsys.readouterr().out


# -----------------------------------------------------------------------------
# GEN-ABI
# -----------------------------------------------------------------------------

def test_gen_abi_missing_directory_exits_with_precondition_code(project: Path, capsys) -> None:
    code = main(["gen-abi", "contracts/interfaces"])

    assert code == 2
    assert "Interfaces directory does not exist" in capsys.readouterr().err


def test_gen_abi_passes_settings_and_reports(project: Path, capsys) -> None:
    result = AbiGenerationResult(
        output_dir=str(project / "abis"),
        successful=["IPool"],
        failures=[CompileFailure(path="IToken.sol", name="IToken", error="boom")],
        index_path=str(project / "abis" / "index.ts"),
        declaration_path=str(project / "abis" / "abis.d.ts"),
    )
    with patch("deploykit.interface.cli.app.generate_abis", return_value=result) as gen:
        code = main(["gen-abi", "interfaces", "abis", "--jobs", "2", "--retry-delay", "0"])

    captured = capsys.readouterr()
    assert code == 0
    settings = gen.call_args.kwargs["settings"]
    assert (settings.jobs, settings.retry_delay, settings.compiler) == (2, 0.0, "solcjs")
    assert "index.ts" in captured.out
    assert "Failed to compile IToken: boom" in captured.err


def test_gen_abi_without_any_success_exits_with_one(project: Path, capsys) -> None:
    result = AbiGenerationResult(
        output_dir=str(project / "abis"),
        failures=[CompileFailure(path="IPool.sol", name="IPool", error="boom")],
    )
    with patch("deploykit.interface.cli.app.generate_abis", return_value=result):
        code = main(["gen-abi", "interfaces"])

    assert code == 1
    assert "No ABI was generated." in capsys.readouterr().err


def test_log_records_reach_stderr_before_teardown(project: Path, capsys) -> None:
    main(["copy-deps", "-i", "src/missing.ts"])
    shutdown_logging()

    assert "ERROR | Start file does not exist" in capsys.readouterr().err


def test_unserializable_config_exits_with_one(project: Path, capsys) -> None:
    (project / "cyclic.py").write_text("config = {}\nconfig['self'] = config\n", encoding="utf-8")

    code = main(["copy-config", "-i", "cyclic.py", "-o", "out"])

    assert code == 1
    assert "cannot be serialized" in capsys.readouterr().err
    assert not (project / "out" / "cyclic.json").exists()
