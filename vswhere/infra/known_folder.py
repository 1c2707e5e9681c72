import ctypes
import os
import uuid
from pathlib import Path

from vswhere.core.errors import KnownFolderError


class _GUID(ctypes.Structure):
    _fields_ = [
        ("Data1", ctypes.c_uint32),
        ("Data2", ctypes.c_uint16),
        ("Data3", ctypes.c_uint16),
        ("Data4", ctypes.c_ubyte * 8),
    ]

    @classmethod
    def from_uuid(cls, value: uuid.UUID) -> "_GUID":
        # GUID stores its first three fields little-endian.
        return cls.from_buffer_copy(value.bytes_le)


def resolve_known_folder(folder_id: uuid.UUID) -> Path:
    """Resolves a Windows known folder (e.g. FOLDERID_ProgramFilesX86) to a path.

    The buffer allocated by the shell is freed on every exit path.

    Args:
        folder_id: The KNOWNFOLDERID to resolve.

    Returns:
        The folder's current path.

    Raises:
        KnownFolderError: If the folder cannot be resolved, or when not on Windows.
    """
    if os.name != "nt":
        raise KnownFolderError(folder_id)

    shell32 = ctypes.WinDLL("shell32")
    ole32 = ctypes.WinDLL("ole32")
    shell32.SHGetKnownFolderPath.argtypes = [
        ctypes.POINTER(_GUID),
        ctypes.c_uint32,
        ctypes.c_void_p,
        ctypes.POINTER(ctypes.c_wchar_p),
    ]
    # c_long rather than HRESULT, which would raise before the buffer is freed.
    shell32.SHGetKnownFolderPath.restype = ctypes.c_long
    ole32.CoTaskMemFree.argtypes = [ctypes.c_void_p]
    ole32.CoTaskMemFree.restype = None

    guid = _GUID.from_uuid(folder_id)
    buffer = ctypes.c_wchar_p()
    try:
        hresult = shell32.SHGetKnownFolderPath(
            ctypes.byref(guid), 0, None, ctypes.byref(buffer)
        )
        if hresult != 0 or buffer.value is None:
            raise KnownFolderError(folder_id, hresult)
        return Path(buffer.value)
    finally:
        ole32.CoTaskMemFree(ctypes.cast(buffer, ctypes.c_void_p))
