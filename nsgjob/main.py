#!/usr/bin/env python
import argparse
from importlib import metadata
import os
import sys
import time

import nsgjob.logging

from .anonymize import anonymizeAppKey, anonymizeUsername, showcaseMode
from .argparse import addArgumentParserBaseFlags, positiveInt
from .binutils import binDescriptionWithStandardFooter
from .config import PROGRESS_FULL, PROGRESS_NONE, Config, ConfigError
from .domain import filter_jobs, sort_jobs
from .domain.job import SORT_FIELDS
from .errors import JobClientError
from .preferences import Preferences
from .progress import ProgressBridge, ProgressObserver
from .service import service
from .service.registry import registerServices
from .service_layer import Dispatcher, JobService, JobSession
from .utils import SPACER, humanBytes, sprint

_DEBUG_LOG_FILE_NAME = "nsgjob-debug"
LOG = nsgjob.logging.getLogger(__name__)

OK = 0
ERROR = 1

DESC = binDescriptionWithStandardFooter("""
nsgjob - Neuroscience Gateway (NSG) job client

Submit jobs to the NSG REST API, follow their status and download all of a
job's output files as a single zip archive.

Job URLs are the ones shown by --list.  When the SHOWCASE_MODE environment
variable is 1, user names and job ids are replaced by stable pseudonyms in
everything that is displayed.

Examples:
    # List jobs, newest first
    $ nsgjob -l

    # Submit a model
    $ nsgjob --submit model.zip --tool NEURON_EXPANSE

    # Wait for a job to finish, then download its results
    $ nsgjob -W -D https://nsgr.sdsc.edu:8443/cipresrest/v1/job/me/NGBW-JOB-...
""")


class ExitCode(Exception):
    def __init__(self, rc):
        super(ExitCode, self).__init__(self, rc)
        self.rc = rc


class TerminalProgress(ProgressObserver):
    """Prints relayed download progress according to the [ui] progress mode."""

    def __init__(self, mode, out=None):
        self._mode = mode
        self._out = out

    def _print(self, *args):
        sprint(*args, file=self._out or sys.stderr)

    def on_progress(self, event):
        if self._mode == PROGRESS_NONE:
            return
        if self._mode == PROGRESS_FULL:
            self._print("{}: {} / {}".format(
                event.filename, humanBytes(event.downloaded),
                humanBytes(event.total)))
        elif event.downloaded == 0:
            self._print("Downloading {} ({})".format(
                event.filename, humanBytes(event.total)))

    def on_complete(self):
        if self._mode != PROGRESS_NONE:
            self._print("Download complete")


def clientFactory(config):
    clientCls = service().remote.client

    def _factory(credentials):
        return clientCls(credentials, base_url=config.baseUrl,
                         timeout=config.timeout)
    return _factory


def connectFromConfig(dispatcher, config):
    creds = config.credentials
    if creds is None:
        LOG.info("no complete [nsg] credentials in %s", config.rcFile)
        return None
    return dispatcher.connect(creds.username, creds.password,
                              creds.app_key).result()


def refreshInterval(options, config, prefs):
    if options.interval:
        return options.interval
    return prefs.autoRefreshInterval(default=config.refreshInterval)


def showJobs(options, dispatcher):
    jobs = dispatcher.list_jobs().result()
    if options.search:
        jobs = filter_jobs(jobs, options.search)
    jobs = sort_jobs(jobs, options.sort, descending=not options.ascending)
    if not jobs:
        sprint("No jobs")
    for job in jobs:
        sprint(job)


def watchStatus(url, options, config, prefs, dispatcher):
    interval = refreshInterval(options, config, prefs)
    lastStage = None
    while True:
        details = dispatcher.get_job_status(url).result()
        if details.job_stage != lastStage:
            sprint(time.strftime("%X"), details.job_id, details.job_stage)
            lastStage = details.job_stage
        if details.is_finished():
            return details
        LOG.debug("job not finished, sleep %d", interval)
        time.sleep(interval)


def handleLocalOptions(options, config, prefs):
    # pylint: disable=too-many-branches
    # pylint: disable=too-many-return-statements
    if options.version:
        version = metadata.version("nsg-jobclient")
        print(f"Version {version}")
        return True
    elif options.credentials_location:
        sprint(config.rcFile)
        return True
    elif options.showcase_mode:
        sprint("on" if showcaseMode() else "off")
        return True
    elif options.get_download_dir:
        sprint(prefs.downloadDir())
        return True
    elif options.set_download_dir:
        prefs.setDownloadDir(os.path.abspath(
            os.path.expanduser(options.set_download_dir)))
        sprint(prefs.downloadDir())
        return True
    elif options.theme is not None:
        if options.theme:
            prefs.setTheme(options.theme)
        sprint(prefs.theme())
        return True
    elif options.zoom:
        action = {
            "in": prefs.zoomIn,
            "out": prefs.zoomOut,
            "reset": prefs.resetZoom,
            "show": prefs.zoom,
        }[options.zoom]
        sprint("{:.0%}".format(action()))
        return True
    elif options.auto_refresh is not None or options.refresh_interval:
        if options.auto_refresh:
            prefs.setAutoRefresh(options.auto_refresh == "on")
        if options.refresh_interval:
            prefs.setAutoRefreshInterval(options.refresh_interval)
        sprint("auto refresh: {}, every {}s".format(
            "on" if prefs.autoRefresh() else "off",
            prefs.autoRefreshInterval(default=config.refreshInterval)))
        return True
    return False


def handleRemoteOptions(options, config, prefs, dispatcher):
    # pylint: disable=too-many-branches
    connected = connectFromConfig(dispatcher, config)
    if options.whoami:
        if connected is None:
            raise ExitCode("No credentials configured in {}".format(config.rcFile))
        creds = config.credentials
        sprint(connected)
        sprint("user:", anonymizeUsername(creds.username))
        sprint("app key:", anonymizeAppKey(creds.app_key))
        return
    if options.list:
        watching = options.watch or prefs.autoRefresh()
        interval = refreshInterval(options, config, prefs)
        while True:
            showJobs(options, dispatcher)
            if not watching:
                return
            time.sleep(interval)
            sprint(SPACER)
    elif options.status:
        for url in options.status:
            if options.watch:
                details = watchStatus(url, options, config, prefs, dispatcher)
            else:
                details = dispatcher.get_job_status(url).result()
            sprint(details.detail())
    elif options.submit:
        if not options.tool:
            raise ExitCode("--submit requires --tool")
        jobId = dispatcher.submit_job(options.submit, options.tool).result()
        sprint("Submitted job", jobId)
    elif options.download:
        outputDir = os.path.expanduser(options.output_dir or prefs.downloadDir())
        for url in options.download:
            if options.watch:
                details = watchStatus(url, options, config, prefs, dispatcher)
                if details.failed:
                    sprint("Job failed; downloading its output anyway")
            path = dispatcher.download_results(url, outputDir).result()
            sprint("Saved results to", path)
    else:
        raise ExitCode("Nothing to do; see --help")


def parseArgs(args=None):
    if args is None:
        prog = sys.argv[0]
        args = sys.argv[1:]
    else:
        prog = None

    op = argparse.ArgumentParser(
        prog=os.path.basename(prog) if prog else "nsgjob",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=DESC)
    addArgumentParserBaseFlags(op, _DEBUG_LOG_FILE_NAME)

    op.add_argument("--version", action="store_true",
                    help="Show the installed version")
    op.add_argument("--whoami", action="store_true",
                    help="Connect with the rc-file credentials and show the user")
    op.add_argument("-l", "--list", action="store_true",
                    help="List jobs")
    op.add_argument("--search", metavar="TEXT",
                    help="With --list, only show jobs with TEXT in any column")
    op.add_argument("--sort", choices=SORT_FIELDS, default="date_submitted",
                    help="With --list, sort by this column (default=%(default)s)")
    op.add_argument("--ascending", action="store_true",
                    help="With --list, sort oldest / lowest first")
    op.add_argument("-s", "--status", metavar="URL", action="append",
                    help="Show status of the job at URL")
    op.add_argument("--submit", metavar="FILE",
                    help="Submit FILE as the input of a new job")
    op.add_argument("--tool", metavar="TOOL",
                    help="Tool for --submit, e.g. NEURON_EXPANSE")
    op.add_argument("-D", "--download", metavar="URL", action="append",
                    help="Download all results of the job at URL as one zip file")
    op.add_argument("-o", "--output-dir", metavar="DIR",
                    help="Directory for --download (default: the "
                    "--set-download-dir preference, else ~/Downloads)")
    op.add_argument("-W", "--watch", action="store_true",
                    help="With --status or --download, poll until the job has "
                    "finished.  With --list, refresh the list until interrupted")
    op.add_argument("--interval", metavar="SECONDS", type=positiveInt,
                    help="Polling interval for --watch")

    prefs = op.add_argument_group("preferences")
    prefs.add_argument("--credentials-location", action="store_true",
                       help="Show where credentials are read from")
    prefs.add_argument("--showcase-mode", action="store_true",
                       help="Show whether showcase mode is active")
    prefs.add_argument("--get-download-dir", action="store_true",
                       help="Show the default download directory")
    prefs.add_argument("--set-download-dir", metavar="DIR",
                       help="Set the default download directory")
    prefs.add_argument("--theme", nargs="?", const="",
                       choices=["", "light", "dark", "system"],
                       help="Show or set the theme preference")
    prefs.add_argument("--zoom", choices=["in", "out", "reset", "show"],
                       help="Change or show the zoom preference")
    prefs.add_argument("--auto-refresh", nargs="?", const="",
                       choices=["", "on", "off"],
                       help="Show or set whether --list refreshes automatically")
    prefs.add_argument("--refresh-interval", metavar="SECONDS", type=positiveInt,
                       help="Set the auto refresh interval")

    return op.parse_args(args)


def impl_main(args=None):
    registerServices()

    options = parseArgs(args)
    config = Config(options)

    nsgjob.logging.setup(
        config.logDir,
        _DEBUG_LOG_FILE_NAME,
        debug=options.debug,
        verbose=config.verbose)
    LOG.debug("starting with args %s", options)
    LOG.debug("python: %s", sys.version)

    prefs = Preferences(config.prefsFile)
    if handleLocalOptions(options, config, prefs):
        return OK

    session = JobSession()
    with ProgressBridge(TerminalProgress(config.uiProgress)) as bridge:
        jobService = JobService(session, clientFactory(config), bridge)
        with Dispatcher(jobService) as dispatcher:
            handleRemoteOptions(options, config, prefs, dispatcher)
    return OK


def main(args=None):
    try:
        return impl_main(args=args)
    except (JobClientError, ConfigError) as error:
        print("Error:", error, file=sys.stderr)
        return ERROR
    except ExitCode as error:
        print(error.rc, file=sys.stderr)
        return ERROR
    except KeyboardInterrupt:
        LOG.debug("interrupted", exc_info=True)
        print("\ninterrupted", file=sys.stderr)
        return ERROR


if __name__ == '__main__':
    sys.exit(main())
