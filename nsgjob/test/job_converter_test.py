from xml.etree import ElementTree

import pytest

from nsgjob.adapters import (
    JobFile,
    error_message,
    joblist_to_summaries,
    jobstatus_to_details,
    jobstatus_to_summary,
    results_to_jobfiles,
)

JOBSTATUS = """\
<jobstatus>
  <selfUri>
    <url>https://host/cipresrest/v1/job/alice/NGBW-JOB-NEURON-1</url>
    <title>NGBW-JOB-NEURON-1</title>
  </selfUri>
  <jobHandle>NGBW-JOB-NEURON-1</jobHandle>
  <jobStage>COMPLETED</jobStage>
  <terminalStage>true</terminalStage>
  <failed>false</failed>
  <dateSubmitted>2024-03-01T10:00:00-08:00</dateSubmitted>
  <resultsUri><url>https://host/cipresrest/v1/job/alice/NGBW-JOB-NEURON-1/output</url></resultsUri>
  <metadata>
    <entry><key>clientJobId</key><value>abc</value></entry>
    <entry><key>Tool</key><value>NEURON_EXPANSE</value></entry>
  </metadata>
  <messages>
    <message>
      <timestamp>2024-03-01T10:00:01-08:00</timestamp>
      <stage>QUEUE</stage>
      <text>Added to cipres run queue.</text>
    </message>
    <message>
      <timestamp>2024-03-01T11:30:00-08:00</timestamp>
      <stage>COMPLETED</stage>
      <text>Output files retrieved.</text>
    </message>
    <message>
      <timestamp>2024-03-01T11:00:00-08:00</timestamp>
      <stage>COMPLETED</stage>
      <text>Job finished.</text>
    </message>
  </messages>
</jobstatus>
"""


def parse(text):
    return ElementTree.fromstring(text)


def testJobstatusToSummary():
    job = jobstatus_to_summary(parse(JOBSTATUS))
    assert job.job_id == 'NGBW-JOB-NEURON-1'
    assert job.url == 'https://host/cipresrest/v1/job/alice/NGBW-JOB-NEURON-1'
    assert job.tool == 'NEURON_EXPANSE'
    assert job.job_stage == 'COMPLETED'
    assert not job.failed
    assert job.date_submitted == '2024-03-01T10:00:00-08:00'
    assert job.date_completed == '2024-03-01T11:30:00-08:00'


def testJobstatusToDetails():
    details = jobstatus_to_details(parse(JOBSTATUS))
    assert details.terminal_stage
    assert details.is_finished()
    assert details.results_uri.endswith('/NGBW-JOB-NEURON-1/output')
    assert [msg.stage for msg in details.messages] == [
        'QUEUE', 'COMPLETED', 'COMPLETED']
    assert details.messages[0].text == 'Added to cipres run queue.'
    assert 'Added to cipres run queue.' in details.detail()


def testMinimalJobstatus():
    details = jobstatus_to_details(parse(
        '<jobstatus><selfUri><url>https://host/job/u/NGBW-JOB-9/</url>'
        '</selfUri><failed>TRUE</failed></jobstatus>'))
    assert details.job_id == 'NGBW-JOB-9'
    assert details.job_stage == 'UNKNOWN'
    assert details.failed
    assert details.results_uri is None
    assert not details.is_finished()


def testJobstatusWithoutUrl():
    with pytest.raises(ValueError):
        jobstatus_to_summary(parse('<jobstatus><jobHandle>x</jobHandle></jobstatus>'))


def testEmptyJoblist():
    assert joblist_to_summaries(parse('<joblist><jobs/></joblist>')) == []


def testResultsToJobfiles():
    root = parse("""\
<results><jobfiles>
  <jobfile>
    <downloadUri><url>https://host/f/1</url><title>STDOUT</title></downloadUri>
    <filename>STDOUT</filename><length>12</length>
  </jobfile>
  <jobfile>
    <downloadUri><url>https://host/f/2</url><title>out.zip</title></downloadUri>
    <length>bogus</length>
  </jobfile>
</jobfiles></results>
""")
    assert results_to_jobfiles(root) == [
        JobFile('STDOUT', 'https://host/f/1', 12),
        JobFile('out.zip', 'https://host/f/2', 0),
    ]


def testJobfileWithoutUrl():
    with pytest.raises(ValueError):
        results_to_jobfiles(parse(
            '<results><jobfiles><jobfile><filename>a</filename></jobfile>'
            '</jobfiles></results>'))


@pytest.mark.parametrize('text, expected', [
    ('<error><displayMessage>Nope</displayMessage><message>x</message></error>',
     'Nope'),
    ('<error><message>Only message</message></error>', 'Only message'),
    ('<error/>', None),
    ('<jobstatus/>', None),
])
def testErrorMessage(text, expected):
    assert error_message(parse(text)) == expected
