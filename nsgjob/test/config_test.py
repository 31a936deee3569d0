import os
import tempfile
import unittest

from mock import MagicMock, patch

from nsgjob import config

from .helpers import HOME, resetEnv

EXAMPLE_RCFILE = """\
[nsg]
username = alice
password = secret
app key = MyApp-0123
url = https://nsg.example.org/cipresrest/v1/
timeout = 15
[ui]
progress = full
refresh interval = 5
"""

BAD_SECTION = """\
[unknown]
"""


def setUpModule():
    resetEnv()


class TestMixin(object):
    @staticmethod
    def config(tempFp=None):
        options = MagicMock()
        options.rcFile = tempFp.name if tempFp else '/a-file-does-not-exist.cfg'
        options.stateDir = '~/x'
        return config.Config(options)


class TestRcParser(unittest.TestCase, TestMixin):
    @patch('os.makedirs')
    def testStateDir(self, _makedirs):
        cfgObj = self.config()
        self.assertEqual(os.path.join(HOME, 'x/log/'), cfgObj.logDir)
        self.assertEqual(os.path.join(HOME, 'x/preferences.json'),
                         cfgObj.prefsFile)

    def testNoFile(self):
        cfgObj = self.config()
        self.assertIsNone(cfgObj.credentials)
        self.assertEqual(config.DEFAULT_BASE_URL, cfgObj.baseUrl)
        self.assertEqual(config.DEFAULT_TIMEOUT, cfgObj.timeout)
        self.assertEqual(config.PROGRESS_SUMMARY, cfgObj.uiProgress)
        self.assertEqual(config.DEFAULT_REFRESH_INTERVAL, cfgObj.refreshInterval)

    def testEmptyFile(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.flush()
            cfgObj = self.config(tempFp)
            self.assertIsNone(cfgObj.credentials)
            self.assertEqual(tempFp.name, cfgObj.rcFile)

    def testConfigured(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write(EXAMPLE_RCFILE)
            tempFp.flush()
            cfgObj = self.config(tempFp)
        creds = cfgObj.credentials
        self.assertEqual('alice', creds.username)
        self.assertEqual('secret', creds.password)
        self.assertEqual('MyApp-0123', creds.app_key)
        self.assertEqual('https://nsg.example.org/cipresrest/v1', cfgObj.baseUrl)
        self.assertEqual(15, cfgObj.timeout)
        self.assertEqual(config.PROGRESS_FULL, cfgObj.uiProgress)
        self.assertEqual(5, cfgObj.refreshInterval)

    def testVerbose(self):
        cfgObj = self.config()
        cfgObj.options.verbose = None
        self.assertEqual(0, cfgObj.verbose)
        cfgObj.options.verbose = [1, 1]
        self.assertEqual(2, cfgObj.verbose)

    def testIncompleteCredentials(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write("[nsg]\nusername = alice\npassword = secret\n")
            tempFp.flush()
            cfgObj = self.config(tempFp)
            self.assertIsNone(cfgObj.credentials)


class TestMalformedRcFile(unittest.TestCase, TestMixin):
    def testBadSection(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write(EXAMPLE_RCFILE + BAD_SECTION)
            tempFp.flush()
            pattern = r'unknown configuration sections: unknown'
            with self.assertRaisesRegex(config.ConfigError, pattern):
                self.config(tempFp)

    def testBadOption(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write(EXAMPLE_RCFILE + "\n" + "xyz = foo\n")
            tempFp.flush()
            pattern = r'unknown configuration options in section "ui": xyz'
            with self.assertRaisesRegex(config.ConfigError, pattern):
                self.config(tempFp)

    def testProgressBadOption(self):
        with tempfile.NamedTemporaryFile(mode='w') as tempFp:
            tempFp.write("[ui]\nprogress=foo\n")
            tempFp.flush()
            pattern = r'RC file has invalid "ui.progress" setting foo.\s*Valid options'
            with self.assertRaisesRegex(config.ConfigError, pattern):
                self.config(tempFp)

    def testBadTimeout(self):
        for value in ('0', '-3', 'soon'):
            with tempfile.NamedTemporaryFile(mode='w') as tempFp:
                tempFp.write("[nsg]\ntimeout = {}\n".format(value))
                tempFp.flush()
                with self.assertRaisesRegex(config.ConfigError,
                                            r'"nsg.timeout".*positive integer'):
                    self.config(tempFp)
