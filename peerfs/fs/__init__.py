from .unixfs import UnixFs, FsStat
