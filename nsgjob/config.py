import configparser
import os

from nsgjob.domain import Credentials

DEFAULT_BASE_URL = "https://nsgr.sdsc.edu:8443/cipresrest/v1"
DEFAULT_TIMEOUT = 60
DEFAULT_REFRESH_INTERVAL = 30

RC_FILE_HELP = """\
Sample rcfile:
    [nsg]
    username = myuser
    password = mypassword
    app key = MyApp-0123456789ABCDEF
    url = https://nsgr.sdsc.edu:8443/cipresrest/v1  # default
    timeout = 60  # seconds, default=60
    [ui]
    progress = full|summary|none  # default=summary
    refresh interval = 30  # seconds between --watch polls, default=30
"""


class ConfigEnum(object):
    __slots__ = (
        'defaultName',
        '_enumVals',
    )

    def __init__(self, default, **enumVals):
        self._enumVals = enumVals
        assert default in enumVals
        self.defaultName = default
        for enumName in enumVals:
            assert enumName not in self.__slots__

    def values(self):
        return self._enumVals.values()

    @property
    def defaultVal(self):
        return self._enumVals[self.defaultName]

    def __getattr__(self, attr):
        assert attr != '_enumVals'
        if attr in self._enumVals:
            return self._enumVals[attr]
        else:
            return object.__getattribute__(self, attr)


PROGRESS_FULL = "full"
PROGRESS_SUMMARY = "summary"
PROGRESS_NONE = "none"

PROGRESS = ConfigEnum(
    'SUMMARY',  # default
    FULL=PROGRESS_FULL,
    SUMMARY=PROGRESS_SUMMARY,
    NONE=PROGRESS_NONE,
)


def _getConfig(cfgParser, section, option, defaultValue=None):
    if not cfgParser.has_section(section):
        return defaultValue
    if not cfgParser.has_option(section, option):
        return defaultValue
    return cfgParser.get(section, option)


def _getEnumConfig(cfgParser, section, option, enum):
    optionVal = _getConfig(
        cfgParser, section, option, enum.defaultVal)
    if optionVal not in list(enum.values()):
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  Valid "
            "options: {allowedVals}".format(
                section=section,
                option=option,
                optionVal=optionVal,
                allowedVals=", ".join(list(enum.values()))))

    return optionVal


def _getIntConfig(cfgParser, section, option, default):
    val = _getConfig(cfgParser, section, option, None)
    if val is None:
        return default
    try:
        intVal = int(val)
    except ValueError:
        intVal = 0
    if intVal <= 0:
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  "
            "Must be a positive integer".format(
                section=section,
                option=option,
                optionVal=val))
    return intVal


class ConfigError(Exception):
    pass


class Config(object):
    # pylint: disable=too-many-instance-attributes
    validConfig = {
        'nsg': {'username', 'password', 'app key', 'url', 'timeout'},
        'ui': {'progress', 'refresh interval'},
    }

    def _validateConfigParser(self, cfgParser):
        cfgSections = set(cfgParser.sections())
        unknownSections = cfgSections - set(self.validConfig.keys())
        if unknownSections:
            raise ConfigError(
                "RC file has unknown configuration sections: {}".format(
                    ", ".join(sorted(unknownSections))))
        for section in cfgSections:
            cfgValues = set(cfgParser.options(section))
            unknownOptions = cfgValues - self.validConfig[section]
            if unknownOptions:
                raise ConfigError(
                    "RC file has unknown configuration options in "
                    "section \"{}\": {}".format(
                        section, ", ".join(sorted(unknownOptions))))

    def __init__(self, options):
        stateDir = options.stateDir
        self.options = options
        self._logDir = os.path.expanduser(stateDir) + "/log/"
        self._prefsFile = os.path.expanduser(stateDir) + "/preferences.json"

        self._rcFile = os.path.expanduser(options.rcFile)
        cfgParser = configparser.RawConfigParser()
        cfgParser.read(self._rcFile)

        self._username = _getConfig(cfgParser, "nsg", "username", "")
        self._password = _getConfig(cfgParser, "nsg", "password", "")
        self._appKey = _getConfig(cfgParser, "nsg", "app key", "")
        self._baseUrl = _getConfig(
            cfgParser, "nsg", "url", DEFAULT_BASE_URL).rstrip("/")
        self._timeout = _getIntConfig(
            cfgParser, "nsg", "timeout", DEFAULT_TIMEOUT)

        self._uiProgress = _getEnumConfig(cfgParser, 'ui', 'progress', PROGRESS)
        self._refreshInterval = _getIntConfig(
            cfgParser, 'ui', 'refresh interval', DEFAULT_REFRESH_INTERVAL)

        self._validateConfigParser(cfgParser)

    @property
    def verbose(self):
        return len(self.options.verbose or [])

    @staticmethod
    def checkDir(dirName):
        if not os.access(dirName, os.W_OK | os.X_OK | os.R_OK):
            os.makedirs(dirName)
        return dirName

    @property
    def logDir(self):
        return self.checkDir(self._logDir)

    @property
    def prefsFile(self):
        self.checkDir(os.path.dirname(self._prefsFile))
        return self._prefsFile

    @property
    def rcFile(self):
        return self._rcFile

    @property
    def credentials(self):
        """Credentials from the rc file, or None if any part is missing."""
        creds = Credentials(
            username=self._username,
            password=self._password,
            app_key=self._appKey)
        return creds if creds.is_complete() else None

    @property
    def baseUrl(self):
        return self._baseUrl

    @property
    def timeout(self):
        return self._timeout

    @property
    def uiProgress(self):
        return self._uiProgress

    @property
    def refreshInterval(self):
        return self._refreshInterval
