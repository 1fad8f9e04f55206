from __future__ import annotations
import io

import main


def _run(monkeypatch, argv, stdin="password\n"):
    monkeypatch.setattr("sys.stdin", io.StringIO(stdin))
    return main.main(argv)


def test_derive_rfc6070(monkeypatch, capsys):
    rc = _run(monkeypatch, [
        "derive", "--prf", "sha1", "-i", "1", "-l", "20",
        "--salt", b"salt".hex(), "--password-stdin",
    ])
    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert out == ["salt=73616c74", "key=0c60c80f961f0e71f3a9b524af6012062fe037a6"]


def test_derive_random_salt(monkeypatch, capsys):
    rc = _run(monkeypatch, ["derive", "-i", "2", "--salt-len", "8", "--password-stdin"])
    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert len(out[0]) == len("salt=") + 16
    assert len(out[1]) == len("key=") + 64


def test_derive_prompts_with_getpass(monkeypatch, capsys):
    monkeypatch.setattr(main, "getpass", lambda prompt: "password")
    rc = main.main(["derive", "--prf", "sha1", "-i", "2", "-l", "20", "-s", "73616c74"])
    assert rc == 0
    assert "key=ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957" in capsys.readouterr().out


def test_derive_bad_salt(monkeypatch, capsys):
    rc = _run(monkeypatch, ["derive", "--salt", "zz", "--password-stdin"])
    assert rc == 2
    assert capsys.readouterr().err.startswith("Error:")


def test_derive_unknown_prf(monkeypatch, capsys):
    rc = _run(monkeypatch, ["derive", "--prf", "nope", "--password-stdin"])
    assert rc == 1
    assert "Unsupported PRF" in capsys.readouterr().err


def test_derive_zero_iterations(monkeypatch, capsys):
    rc = _run(monkeypatch, ["derive", "-i", "0", "--password-stdin"])
    assert rc == 1
    assert "Iteration count" in capsys.readouterr().err


def test_prfs(capsys):
    assert main.main(["prfs"]) == 0
    assert "sha256\t32" in capsys.readouterr().out.splitlines()
