from __future__ import annotations

from typing import Dict, Optional, Protocol, Tuple, Union

try:  # Windows-only module; tests use an in-memory accessor instead
    import winreg  # type: ignore
except ImportError:  # pragma: no cover - not available on Linux runners
    winreg = None  # type: ignore

RegValue = Union[str, int]


class RegistryAccessor(Protocol):
    def get_value(self, path: str, value_name: str) -> Optional[RegValue]:
        ...

    def set_value(self, path: str, value_name: str, value: RegValue) -> None:
        ...


class WindowsRegistryAccessor:
    """Minimal registry helper backed by winreg. Paths look like "HKCU:\\Software\\..."."""

    def __init__(self) -> None:
        if winreg is None:
            raise RuntimeError("winreg not available on this platform")

    def get_value(self, path: str, value_name: str) -> Optional[RegValue]:
        hive, subkey = self._split_path(path)
        try:
            with winreg.OpenKey(hive, subkey) as key:  # type: ignore[arg-type]
                value, _ = winreg.QueryValueEx(key, value_name)
                return value
        except FileNotFoundError:
            return None

    def set_value(self, path: str, value_name: str, value: RegValue) -> None:
        hive, subkey = self._split_path(path)
        value_type = winreg.REG_DWORD if isinstance(value, int) else winreg.REG_SZ
        with winreg.CreateKeyEx(hive, subkey) as key:  # type: ignore[arg-type]
            winreg.SetValueEx(key, value_name, 0, value_type, value)

    def _split_path(self, path: str) -> Tuple[object, str]:
        cleaned = path.replace("/", "\\")
        marker = ":\\"
        if marker not in cleaned:
            raise ValueError(f"Invalid registry path: {path}")
        hive_name, subkey = cleaned.split(marker, 1)
        hive_map = {
            "HKLM": winreg.HKEY_LOCAL_MACHINE,
            "HKCU": winreg.HKEY_CURRENT_USER,
        }
        try:
            hive = hive_map[hive_name.upper()]
        except KeyError as exc:
            raise ValueError(f"Unsupported hive: {hive_name}") from exc
        return hive, subkey.lstrip("\\")


class MemoryRegistryAccessor:
    """Dict-backed accessor for dry runs on non-Windows hosts and tests."""

    def __init__(self) -> None:
        self.values: Dict[Tuple[str, str], RegValue] = {}

    def get_value(self, path: str, value_name: str) -> Optional[RegValue]:
        return self.values.get((path, value_name))

    def set_value(self, path: str, value_name: str, value: RegValue) -> None:
        self.values[(path, value_name)] = value


def default_registry() -> RegistryAccessor:
    if winreg is None:
        return MemoryRegistryAccessor()
    return WindowsRegistryAccessor()
