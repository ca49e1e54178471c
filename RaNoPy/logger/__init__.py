from .logger import Log, Entry
