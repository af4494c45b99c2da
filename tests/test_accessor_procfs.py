import pytest

from sysctld.sysctl_api import (
    ProcfsSysctlAccessor,
    SysctlError,
    SysctlNotFoundError,
    SysctlTypeError,
    SysctlUnsupportedError,
    UnsupportedSysctlAccessor,
    select_accessor,
)


@pytest.fixture
def procfs(tmp_path):
    kernel = tmp_path / "kernel"
    kernel.mkdir()
    (kernel / "hostname").write_text("box.example\n", encoding="utf-8")
    (kernel / "pid_max").write_text("4194304\n", encoding="utf-8")
    (kernel / "printk").write_text("4\t4\t1\t7\n", encoding="utf-8")
    (kernel / "huge").write_text(f"{2**64}\n", encoding="utf-8")
    (kernel / "negative").write_text("-1\n", encoding="utf-8")
    (tmp_path / "net" / "ipv4").mkdir(parents=True)
    return ProcfsSysctlAccessor(tmp_path)


def test_read_string_strips_trailing_newline(procfs):
    assert procfs.read_string("kernel.hostname") == "box.example"


def test_read_int64(procfs):
    assert procfs.read_int64("kernel.pid_max") == 4194304
    assert procfs.read_int64("kernel.negative") == -1


def test_integer_sysctl_readable_as_string(procfs):
    assert procfs.read_string("kernel.pid_max") == "4194304"


def test_missing_name_is_not_found(procfs):
    with pytest.raises(SysctlNotFoundError) as excinfo:
        procfs.read_string("non.existent")
    assert str(excinfo.value) == "no such file or directory"
    assert excinfo.value.name == "non.existent"


def test_path_below_a_value_is_not_found(procfs):
    with pytest.raises(SysctlNotFoundError):
        procfs.read_int64("kernel.hostname.extra")


def test_string_is_not_an_integer(procfs):
    with pytest.raises(SysctlTypeError):
        procfs.read_int64("kernel.hostname")


def test_table_is_not_an_integer(procfs):
    with pytest.raises(SysctlTypeError):
        procfs.read_int64("kernel.printk")


def test_int64_overflow_is_type_error(procfs):
    with pytest.raises(SysctlTypeError):
        procfs.read_int64("kernel.huge")


def test_tree_node_is_type_error(procfs):
    with pytest.raises(SysctlTypeError):
        procfs.read_string("net.ipv4")


@pytest.mark.parametrize("name", ["", "kernel..hostname", "..", "kernel.hostname.", "kernel/hostname", "a\x00b"])
def test_malformed_names_never_leave_root(procfs, name):
    with pytest.raises(SysctlNotFoundError):
        procfs.read_string(name)


def test_all_failures_share_base_class(procfs):
    for name in ("non.existent", "kernel.printk"):
        with pytest.raises(SysctlError):
            procfs.read_int64(name)


def test_unsupported_platform_accessor():
    accessor = UnsupportedSysctlAccessor("win32")
    with pytest.raises(SysctlUnsupportedError) as excinfo:
        accessor.read_string("kern.hostname")
    assert "win32" in str(excinfo.value)
    with pytest.raises(SysctlUnsupportedError):
        accessor.read_int64("hw.ncpu")


def test_select_accessor_by_platform():
    assert isinstance(select_accessor("linux"), ProcfsSysctlAccessor)
    assert isinstance(select_accessor("win32"), UnsupportedSysctlAccessor)
