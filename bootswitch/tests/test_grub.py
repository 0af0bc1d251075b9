import pytest

from bootswitch.grub import GrubConfig

GRUB_CFG = """\
### BEGIN /etc/grub.d/10_linux ###
menuentry 'Ubuntu' --class ubuntu --class gnu-linux $menuentry_id_option 'gnulinux-simple' {
	recordfail
}
submenu 'Advanced options for Ubuntu' $menuentry_id_option 'gnulinux-advanced' {
	menuentry 'Ubuntu, with Linux 6.8.0-45-generic' --class ubuntu {
		recordfail
	}
}
### BEGIN /etc/grub.d/30_os-prober ###
menuentry 'Windows Boot Manager (on /dev/nvme0n1p1)' --class windows --class os {
	insmod part_gpt
}
menuentry "windows 11 (recovery)" {
	chainloader +1
}
menuentry 'UEFI Firmware Settings' $menuentry_id_option 'uefi-firmware' {
	fwsetup
}
"""


@pytest.fixture
def grub_cfg(tmp_path):
    path = tmp_path / "grub.cfg"
    path.write_text(GRUB_CFG)
    return str(path)


def test_menu_entries(grub_cfg):
    assert GrubConfig(grub_cfg).menu_entries() == [
        "Ubuntu",
        "Ubuntu, with Linux 6.8.0-45-generic",
        "Windows Boot Manager (on /dev/nvme0n1p1)",
        "windows 11 (recovery)",
        "UEFI Firmware Settings",
    ]


def test_find_entry_returns_last_match(grub_cfg):
    assert GrubConfig(grub_cfg).find_entry() == "windows 11 (recovery)"


def test_find_entry_matches_prefix_only(grub_cfg):
    grub = GrubConfig(grub_cfg)
    assert grub.find_entry("UEFI") == "UEFI Firmware Settings"
    assert grub.find_entry("Manager") is None


def test_no_windows_entry(tmp_path):
    path = tmp_path / "grub.cfg"
    path.write_text("menuentry 'Debian GNU/Linux' {\n}\n")
    assert GrubConfig(str(path)).find_entry() is None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        GrubConfig(str(tmp_path / "missing.cfg"))
