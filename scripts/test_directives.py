"""
类型化指令读取器回归测试：[ system ] 标题与 [ molecules ] 分子表，以及拓扑概要。

用法：
  python scripts/test_directives.py
"""

from __future__ import annotations

from pathlib import Path
import sys
import tempfile

REPO_ROOT = Path(__file__).resolve().parents[1]


def _ensure_backend_src_on_path(repo_root: Path) -> None:
    src_dir = repo_root / "backend" / "src"
    if not src_dir.exists():
        raise RuntimeError(f"找不到 backend/src：{src_dir}")
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def _expect_structural(document: bytes, kind: str):
    from gmxtop.errors import StructuralError
    from topmono_backend.domain.directives import parse_molecule_table

    try:
        parse_molecule_table(document)
    except StructuralError as e:
        assert e.kind == kind, f"预期 kind={kind}，实际={e.kind}"
        return e
    raise AssertionError(f"预期 {kind} 失败：{document!r}")


def test_system_title() -> None:
    from topmono_backend.domain.directives import SystemDirective, parse_system_title

    d = SystemDirective()
    d.parse_monolith(b"[ system ]\nPOPC membrane\n")
    assert d.name == "POPC membrane"

    assert parse_system_title(b"[ system ]\n\n\nPOPC membrane\n\n[ molecules ]\nPOPC 128\n") == "POPC membrane"
    assert parse_system_title(b"[ system ]\n[ molecules ]\n") == "", "空 system 段应得到空标题"


def test_system_title_missing_section() -> None:
    from gmxtop.errors import DirectiveNotFoundError
    from topmono_backend.domain.directives import parse_system_title

    try:
        parse_system_title(b"[ molecules ]\nSOL 1\n")
    except DirectiveNotFoundError as e:
        assert e.name == "system"
    else:
        raise AssertionError("缺少 system 段必须报错")


def test_molecule_table_order() -> None:
    from topmono_backend.domain.directives import parse_molecule_table

    table = parse_molecule_table(b"[ molecules ]\nfoo 1\nbar 2\nbaz 3\n")
    assert list(table.items()) == [("foo", 1), ("bar", 2), ("baz", 3)]

    table = parse_molecule_table(b"[ system ]\nx\n[ molecules ]\nPOPC   128\n\nSOL\t6400 ; water\n[ end ]\n")
    assert list(table.items()) == [("POPC", 128), ("SOL", 6400)]

    assert parse_molecule_table(b"[ molecules ]\n") == {}, "空 molecules 段应得到空表"
    assert parse_molecule_table(b"[ molecules ]\nBIG 18446744073709551615\n") == {"BIG": 2**64 - 1}


def test_molecule_names_split_only_on_blanks() -> None:
    from topmono_backend.domain.directives import parse_molecule_table

    # 不间断空格属于名字本身，只有空格 / 制表符 / 回车是分隔符
    table = parse_molecule_table("[ molecules ]\nLIG\u00a0A 3\r\n".encode("utf-8"))
    assert list(table.items()) == [("LIG\u00a0A", 3)]
    _expect_structural("[ molecules ]\nLIG\u00a03\n".encode("utf-8"), "missing_token")


def test_non_utf8_title_and_molecules() -> None:
    from gmxtop.monolith import create_monolith
    from topmono_backend.domain.directives import parse_molecule_table, parse_system_title

    with tempfile.TemporaryDirectory() as tmp:
        d = Path(tmp)
        (d / "t.top").write_bytes("[ system ]\nProtéine\n[ molecules ]\nProtéine 2\nSOL 10\n".encode("latin-1"))
        monolith = create_monolith(d, "t.top")

    assert parse_system_title(monolith) == "Prot\ufffdine"
    assert list(parse_molecule_table(monolith).items()) == [("Prot\ufffdine", 2), ("SOL", 10)]


def test_molecule_table_errors() -> None:
    e = _expect_structural(b"[ molecules ]\nfoo 1\nbar 2 bad\nbaz 3\n", "unexpected_token")
    assert e.line_no == 2
    _expect_structural(b"[ molecules ]\nfoo\n", "missing_token")
    _expect_structural(b"[ molecules ]\nfoo -1\n", "invalid_count")
    _expect_structural(b"[ molecules ]\nfoo 1.5\n", "invalid_count")
    _expect_structural(b"[ molecules ]\nfoo 18446744073709551616\n", "invalid_count")
    _expect_structural(b"[ molecules ]\nfoo 1\nfoo 2\n", "duplicate_molecule")


def test_add_molecule_rejects_duplicates() -> None:
    from gmxtop.errors import StructuralError
    from topmono_backend.domain.directives import MoleculesDirective

    d = MoleculesDirective()
    d.add_molecule("SOL", 10)
    try:
        d.add_molecule("SOL", 20)
    except StructuralError as e:
        assert e.kind == "duplicate_molecule"
    else:
        raise AssertionError("重复分子名必须报错")
    assert d.molecules == {"SOL": 10}, "失败的插入不能覆盖已有值"


def test_summary() -> None:
    from topmono_backend.domain.summary import summarize, summary_to_dict

    monolith = (
        b"#define POSRES\n#define\n#definex y\n[ atomtypes ]\nOW 1\n[ system ]\nPOPC membrane\n"
        b"[ molecules ]\nPOPC 128\nSOL 10\n"
    )
    s = summarize(monolith)
    assert s.directives == ["atomtypes", "system", "molecules"]
    assert s.defines == ["POSRES"], f"非法 define 行应跳过：{s.defines!r}"
    assert s.system == "POPC membrane"
    assert s.molecules == {"POPC": 128, "SOL": 10}

    d = summary_to_dict(s)
    assert d["molecules"] == [{"name": "POPC", "count": 128}, {"name": "SOL", "count": 10}]

    bare = summarize(b"[ atoms ]\n1 OW\n")
    assert bare.system is None and bare.molecules is None
    assert summary_to_dict(bare)["molecules"] is None


def main() -> None:
    _ensure_backend_src_on_path(REPO_ROOT)

    test_system_title()
    test_system_title_missing_section()
    test_molecule_table_order()
    test_molecule_names_split_only_on_blanks()
    test_non_utf8_title_and_molecules()
    test_molecule_table_errors()
    test_add_molecule_rejects_duplicates()
    test_summary()
    print("[OK] typed directive readers")


if __name__ == "__main__":
    main()
