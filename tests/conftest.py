import textwrap

import pytest

from saa_practice.services.exam_parser import parse
from saa_practice.services.exam_service import score
from saa_practice.services.session_machine import ExamSessionMachine
from saa_practice.services.session_store import SessionStore


SAMPLE_EXAM = textwrap.dedent("""\
    # AWS SAA-C03 Practice Exam

    Intro text that belongs to no question.

    ### Câu 3
    Which service provides a managed relational database?

    **A.** Amazon S3

    **B.** Amazon RDS

    **C.** Amazon SQS

    **D.** AWS Lambda
    ---

    ### Câu 1
    Which storage class is cheapest for archival data
    that is rarely accessed?

    **A.** S3 Standard

    **B.** S3 Glacier Deep Archive

    **C.** S3 Intelligent-Tiering

    **D.** EBS gp3
    ---

    ### Câu 5
    This block only has three options.

    **A.** One

    **B.** Two

    **C.** Three
    ---

    ### Câu 7
    Which service decouples producers and consumers?

    **A.** Amazon EC2

    **B.** Amazon Route 53

    **C.** Amazon SQS

    **D.** AWS IAM
    ---

    ## Answers

    **Câu 1: B**
    **Câu 3: B**
    **Câu 5: A**
    **Câu 7: C**
    """)


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sample_text():
    return SAMPLE_EXAM


@pytest.fixture
def parsed_sample():
    return parse(SAMPLE_EXAM)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path):
    return SessionStore(directory=str(tmp_path), namespace="test_exam_state")


@pytest.fixture
def score_calls():
    return []


@pytest.fixture
def make_machine(parsed_sample, store, clock, score_calls):
    """문제 형태만 넘기고, 채점은 원본 텍스트로 하는 머신 팩토리."""
    def _make(**kwargs):
        def scorer(answers):
            score_calls.append(dict(answers))
            return score(SAMPLE_EXAM, answers)

        kwargs.setdefault("store", store)
        kwargs.setdefault("clock", clock)
        return ExamSessionMachine(parsed_sample.questions, scorer, **kwargs)

    return _make
