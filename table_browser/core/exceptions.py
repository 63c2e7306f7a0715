class TableBrowserError(Exception):
    """Base exception for all table_browser errors"""
    pass

class ConfigError(TableBrowserError):
    """Invalid or inconsistent global.json / table config, or bad table options"""
    pass

class TableLoadError(TableBrowserError):
    """
    A configured table source could not be materialised:
    missing CSV file, unreadable file, header/column mismatch
    """
    pass
