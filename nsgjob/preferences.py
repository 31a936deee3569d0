"""Durable user preferences kept in a JSON file under the state directory."""

import logging
import os

import simplejson as json

from nsgjob.errors import PreferencesError

LOG = logging.getLogger(__name__)

KEY_DOWNLOAD_DIR = "download_dir"
KEY_THEME = "theme"
KEY_ZOOM = "zoom_level"
KEY_AUTO_REFRESH = "auto_refresh"
KEY_AUTO_REFRESH_INTERVAL = "auto_refresh_interval"

THEMES = ("light", "dark", "system")
DEFAULT_THEME = "system"

ZOOM_DEFAULT = 1.0
ZOOM_STEP = 0.1
ZOOM_MIN = 0.5
ZOOM_MAX = 3.0

DEFAULT_AUTO_REFRESH_INTERVAL = 30


class Preferences(object):
    def __init__(self, prefsFile):
        self._prefsFile = prefsFile

    @property
    def location(self):
        return self._prefsFile

    def _read(self):
        try:
            with open(self._prefsFile, 'r') as prefsFp:
                data = json.load(prefsFp)
        except IOError:
            return {}
        except json.JSONDecodeError:
            LOG.warning("ignoring corrupt preferences file %s", self._prefsFile)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data):
        tmpFile = self._prefsFile + ".tmp"
        try:
            with open(tmpFile, 'w') as prefsFp:
                json.dump(data, prefsFp, indent=2, sort_keys=True)
            os.replace(tmpFile, self._prefsFile)
        except OSError as err:
            raise PreferencesError(
                "Failed to save preferences: {}".format(err)) from err

    def get(self, key, default=None):
        return self._read().get(key, default)

    def put(self, key, value):
        data = self._read()
        if data.get(key) != value:
            data[key] = value
            self._write(data)

    def downloadDir(self):
        custom = self.get(KEY_DOWNLOAD_DIR)
        if isinstance(custom, str) and custom:
            return custom
        home = os.getenv('HOME') or os.getenv('USERPROFILE')
        if not home:
            raise PreferencesError("Could not determine home directory")
        return os.path.join(home, "Downloads")

    def setDownloadDir(self, dirName):
        if not os.path.exists(dirName):
            raise PreferencesError("Directory does not exist: {}".format(dirName))
        if not os.path.isdir(dirName):
            raise PreferencesError("Path is not a directory: {}".format(dirName))
        self.put(KEY_DOWNLOAD_DIR, dirName)

    def theme(self):
        value = self.get(KEY_THEME)
        return value if value in THEMES else DEFAULT_THEME

    def setTheme(self, theme):
        if theme not in THEMES:
            raise PreferencesError(
                "Invalid theme {!r}.  Valid options: {}".format(
                    theme, ", ".join(THEMES)))
        self.put(KEY_THEME, theme)

    def zoom(self):
        value = self.get(KEY_ZOOM, ZOOM_DEFAULT)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return ZOOM_DEFAULT
        return float(value)

    def _setZoom(self, value):
        value = round(min(ZOOM_MAX, max(ZOOM_MIN, value)), 1)
        self.put(KEY_ZOOM, value)
        return value

    def zoomIn(self):
        return self._setZoom(self.zoom() + ZOOM_STEP)

    def zoomOut(self):
        return self._setZoom(self.zoom() - ZOOM_STEP)

    def resetZoom(self):
        return self._setZoom(ZOOM_DEFAULT)

    def autoRefresh(self):
        return self.get(KEY_AUTO_REFRESH) is True

    def setAutoRefresh(self, enabled):
        self.put(KEY_AUTO_REFRESH, bool(enabled))

    def autoRefreshInterval(self, default=DEFAULT_AUTO_REFRESH_INTERVAL):
        value = self.get(KEY_AUTO_REFRESH_INTERVAL)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            return default
        return value

    def setAutoRefreshInterval(self, interval):
        if isinstance(interval, bool) or not isinstance(interval, int) \
                or interval <= 0:
            raise PreferencesError(
                "Refresh interval must be a positive number of seconds")
        self.put(KEY_AUTO_REFRESH_INTERVAL, interval)
