from peerfs.errors import ValidationError

# Path helpers for the file system layer. Paths are posix style, absolute paths are
# relative to the root directory of the file system.

def tree_path_parts(path:str, allow_absolute:bool=True) -> list[str]:
    """Returns a list of path parts, with empty parts removed"""
    if(path == "" or path is None):
        return []
    path = path.replace("//", "/")
    if(path[0] == "/"):
        if not allow_absolute:
            raise ValidationError(f"Path must be relative, but was '{path}'.")
        path = path[1:]
    if(len(path) > 0 and path[-1] == "/"):
        path = path[:-1]
    parts = path.split("/")
    parts = [part for part in parts if part != ""]
    _enforce_no_dot_parts(parts, path)
    return parts

def file_path_parts(path:str, allow_absolute:bool=True) -> list[str]:
    if(path == "" or path is None):
        raise ValidationError(f"File path cannot be empty, but was '{path}'.")
    path = path.replace("//", "/")
    if(path[0] == "/"):
        if not allow_absolute:
            raise ValidationError(f"Path must be relative, but was '{path}'.")
        path = path[1:]
    if(len(path) == 0 or path[-1] == "/"):
        raise ValidationError(f"Path to a file must not end with a slash, but was '{path}'.")
    parts = path.split("/")
    parts = [part for part in parts if part != ""]
    _enforce_no_dot_parts(parts, path)
    return parts

def enforce_entry_name(name:str) -> str:
    if not isinstance(name, str):
        raise ValidationError(f"Entry name must be a string, not a '{type(name)}'.")
    if name == "" or "/" in name or name in (".", ".."):
        raise ValidationError(f"Invalid directory entry name '{name}'.")
    return name

def _enforce_no_dot_parts(parts:list[str], path:str):
    if any(part in (".", "..") for part in parts):
        raise ValidationError(f"Path must not contain '.' or '..' parts, but was '{path}'.")
