import subprocess
import sys

import pytest

from rnaquant.provenance import do


def test_invocation_flattens_and_stringifies():
    cmd = do.invocation("kallisto", "quant", "-t", 4, ["--bias"], None, [["a", "b"]])
    assert cmd.program == "kallisto"
    assert cmd.args == ["quant", "-t", "4", "--bias", "a", "b"]
    assert do.cmdline(cmd) == ["kallisto", "quant", "-t", "4", "--bias", "a", "b"]


def test_shell_strings_are_rejected():
    with pytest.raises(ValueError):
        do.cmdline("fastqc -o out reads.fastq.gz")


def test_run_success(tmp_path):
    out_file = tmp_path / "out.txt"
    code = "open(%r, 'w').write('ok')" % str(out_file)
    do.run(do.invocation(sys.executable, "-c", code), "Write a file")
    assert out_file.read_text() == "ok"


def test_run_arguments_are_not_shell_expanded(tmp_path):
    out_file = tmp_path / "out.txt"
    code = "import sys; open(%r, 'w').write(sys.argv[1])" % str(out_file)
    do.run([sys.executable, "-c", code, "$HOME; rm -rf *"])
    assert out_file.read_text() == "$HOME; rm -rf *"


def test_run_failure_raises_with_exit_status():
    code = "import sys; print('bad index'); sys.exit(3)"
    with pytest.raises(subprocess.CalledProcessError) as e:
        do.run(do.invocation(sys.executable, "-c", code), log_error=False)
    assert e.value.returncode == 3
    assert "bad index" in e.value.cmd


def test_run_missing_program():
    with pytest.raises(OSError):
        do.run(do.invocation("rnaquant-no-such-program"), log_error=False)
