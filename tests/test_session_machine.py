import json
import threading
import time

import pytest

from saa_practice.errors import EmptyExamError, InvalidPayloadError, StaleTransitionError
from saa_practice.models.session_state import ExamPhase, ExamSession
from saa_practice.services.session_machine import ExamSessionMachine

DURATION = 7800


def _wait_for(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestStart:
    def test_start_from_fresh_session(self, make_machine, clock):
        machine = make_machine()
        session = machine.start()
        assert session.phase is ExamPhase.IN_PROGRESS
        assert session.deadline == clock.now + DURATION
        assert session.current_index == 0
        assert session.answers == {}
        assert session.result is None

    def test_start_twice_is_stale(self, make_machine):
        machine = make_machine()
        machine.start()
        with pytest.raises(StaleTransitionError):
            machine.start()

    def test_requires_questions(self, store):
        with pytest.raises(EmptyExamError):
            ExamSessionMachine([], scorer=lambda answers: None, store=store)


class TestAnswersAndNavigation:
    def test_select_answer_records_current_question_number(self, make_machine):
        machine = make_machine()
        machine.start()
        machine.select_answer("B")
        machine.navigate(2)
        machine.select_answer("C")
        assert machine.session.answers == {"1": "B", "7": "C"}
        assert machine.answered_count == 2

    def test_reselecting_same_label_is_persisted(self, make_machine, store):
        machine = make_machine()
        machine.start()
        machine.select_answer("A")
        machine.select_answer("A")
        assert store.load().answers == {"1": "A"}

    def test_invalid_label(self, make_machine):
        machine = make_machine()
        machine.start()
        with pytest.raises(InvalidPayloadError):
            machine.select_answer("E")

    @pytest.mark.parametrize("target,expected", [(-5, 0), (1, 1), (99, 2)])
    def test_navigate_clamps(self, make_machine, target, expected):
        machine = make_machine()
        machine.start()
        assert machine.navigate(target) == expected
        assert machine.current_question.number == [1, 3, 7][expected]

    def test_next_and_previous(self, make_machine):
        machine = make_machine()
        machine.start()
        assert machine.next_question() == 1
        assert machine.next_question() == 2
        assert machine.next_question() == 2
        assert machine.previous_question() == 1

    def test_transitions_before_start_are_stale(self, make_machine, store):
        machine = make_machine()
        with pytest.raises(StaleTransitionError):
            machine.select_answer("A")
        with pytest.raises(StaleTransitionError):
            machine.navigate(1)
        with pytest.raises(StaleTransitionError):
            machine.submit()
        assert store.load() is None


class TestTimer:
    def test_tick_reports_remaining_time(self, make_machine, clock):
        machine = make_machine()
        machine.start()
        assert machine.tick(clock.now + 100) == DURATION - 100
        assert machine.phase is ExamPhase.IN_PROGRESS

    def test_expired_tick_auto_submits_once(self, make_machine, clock, score_calls):
        machine = make_machine()
        machine.start()
        remaining = machine.tick(clock.now + DURATION + 1)
        assert remaining == -1
        assert machine.phase is ExamPhase.SUBMITTED
        assert machine.session.result is not None
        assert machine.tick(clock.now + DURATION + 2) is None
        assert len(score_calls) == 1

    def test_tick_at_exact_deadline_submits(self, make_machine, clock):
        machine = make_machine()
        machine.start()
        machine.tick(clock.now + DURATION)
        assert machine.phase is ExamPhase.SUBMITTED

    def test_overlapping_ticks_submit_once(self, make_machine, clock, score_calls):
        machine = make_machine()
        machine.start()
        barrier = threading.Barrier(8)
        expired = clock.now + DURATION + 5

        def worker():
            barrier.wait()
            machine.tick(expired)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert machine.phase is ExamPhase.SUBMITTED
        assert len(score_calls) == 1

    def test_tick_before_start_is_noop(self, make_machine, store):
        machine = make_machine()
        assert machine.tick() is None
        assert store.load() is None

    def test_remaining_seconds_rounds_for_display(self, make_machine, clock):
        machine = make_machine()
        assert machine.remaining_seconds() == DURATION
        machine.start()
        clock.advance(100.4)
        assert machine.remaining_seconds() == DURATION - 100
        clock.advance(DURATION)
        assert machine.remaining_seconds() == 0


class TestSubmit:
    def test_manual_submit_scores_answers(self, make_machine, score_calls):
        machine = make_machine()
        machine.start()
        machine.select_answer("B")
        result = machine.submit()
        assert score_calls == [{"1": "B"}]
        assert result.correct == 1
        assert machine.session.result == result
        assert machine.phase is ExamPhase.SUBMITTED

    def test_declined_confirmation_is_noop(self, make_machine, score_calls):
        machine = make_machine()
        machine.start()
        assert machine.submit(confirm=lambda: False) is None
        assert machine.phase is ExamPhase.IN_PROGRESS
        assert score_calls == []

    def test_auto_submit_skips_confirmation(self, make_machine):
        machine = make_machine()
        machine.start()
        machine.submit(auto=True, confirm=lambda: False)
        assert machine.phase is ExamPhase.SUBMITTED

    def test_transitions_after_submit_are_stale(self, make_machine, store):
        machine = make_machine()
        machine.start()
        machine.submit()
        saved = store.load()
        for action in (lambda: machine.select_answer("A"), lambda: machine.navigate(0), machine.submit, machine.start):
            with pytest.raises(StaleTransitionError):
                action()
        assert store.load() == saved

    def test_scorer_failure_leaves_session_in_progress(self, parsed_sample, store, clock):
        def broken(answers):
            raise RuntimeError("scoring service down")

        machine = ExamSessionMachine(parsed_sample.questions, broken, store=store, clock=clock)
        machine.start()
        with pytest.raises(RuntimeError):
            machine.submit()
        assert machine.phase is ExamPhase.IN_PROGRESS
        assert store.load().phase is ExamPhase.IN_PROGRESS


class TestReset:
    def test_reset_from_submitted(self, make_machine, store):
        machine = make_machine()
        machine.start()
        machine.select_answer("B")
        machine.submit()
        machine.reset()
        session = machine.session
        assert session.phase is ExamPhase.NOT_STARTED
        assert session.result is None
        assert session.answers == {}
        assert session.deadline is None
        assert store.load() is None

    def test_new_attempt_after_reset(self, make_machine, clock):
        machine = make_machine()
        machine.start()
        machine.submit()
        machine.reset()
        clock.advance(60)
        assert machine.start().deadline == clock.now + DURATION


class TestPersistence:
    def test_every_transition_is_persisted(self, make_machine, store):
        machine = make_machine()
        machine.start()
        assert store.load() == machine.session
        machine.navigate(1)
        machine.select_answer("D")
        assert store.load() == machine.session

    def test_persisted_record_uses_camel_case(self, make_machine, store):
        machine = make_machine()
        machine.start()
        with open(store.path, encoding="utf-8") as f:
            data = json.load(f)
        assert set(data) == {"phase", "currentIndex", "answers", "deadline", "result"}
        assert data["phase"] == "in_progress"

    def test_rehydrate_restores_session_verbatim(self, make_machine, clock):
        first = make_machine()
        first.start()
        first.navigate(2)
        first.select_answer("C")
        before = first.session

        clock.advance(600)
        second = make_machine()
        restored = second.rehydrate()
        assert restored == before
        assert second.remaining_seconds() == DURATION - 600

    def test_rehydrate_expired_session_auto_submits(self, make_machine, clock, score_calls):
        first = make_machine()
        first.start()
        first.select_answer("B")

        clock.advance(DURATION + 30)
        second = make_machine()
        restored = second.rehydrate()
        assert restored.phase is ExamPhase.SUBMITTED
        assert restored.result.correct == 1
        assert score_calls == [{"1": "B"}]

    def test_rehydrate_submitted_session_does_not_rescore(self, make_machine, score_calls):
        first = make_machine()
        first.start()
        first.submit()
        second = make_machine()
        assert second.rehydrate().phase is ExamPhase.SUBMITTED
        assert len(score_calls) == 1

    def test_rehydrate_without_record(self, make_machine):
        assert make_machine().rehydrate().phase is ExamPhase.NOT_STARTED

    @pytest.mark.parametrize("content", [
        "{not json",
        '{"phase": "in_progress", "currentIndex": 0, "answers": {}}',
        '{"phase": "submitted", "deadline": 1.0}',
        '{"phase": "bogus"}',
        '{"phase": "in_progress", "currentIndex": -1, "deadline": 1.0}',
        '{"phase": "in_progress", "currentIndex": 0, "answers": {}, "deadline": Infinity}',
        '{"phase": "in_progress", "currentIndex": 0, "answers": {}, "deadline": NaN}',
    ])
    def test_corrupt_record_falls_back_to_not_started(self, make_machine, store, content):
        store.save(ExamSession())
        with open(store.path, "w", encoding="utf-8") as f:
            f.write(content)
        machine = make_machine()
        assert machine.rehydrate().phase is ExamPhase.NOT_STARTED
        assert store.load() is None

    def test_rehydrate_clamps_index_to_question_count(self, make_machine, store, clock):
        store.save(ExamSession(phase=ExamPhase.IN_PROGRESS, current_index=10, deadline=clock.now + 60))
        machine = make_machine()
        assert machine.rehydrate().current_index == 2


class TestBackgroundTicker:
    def test_ticker_auto_submits_and_stops(self, make_machine, clock, score_calls):
        machine = make_machine(tick_interval=0.01)
        machine.start()
        clock.advance(DURATION + 1)
        assert _wait_for(lambda: machine.phase is ExamPhase.SUBMITTED)
        assert _wait_for(lambda: not machine._ticker.running)
        time.sleep(0.05)
        assert len(score_calls) == 1
        machine.close()

    def test_rehydrate_resumes_ticker_and_close_stops_it(self, make_machine):
        make_machine().start()
        machine = make_machine(tick_interval=0.01)
        machine.rehydrate()
        assert machine._ticker.running
        machine.close()
        assert not machine._ticker.running

    def test_reset_stops_ticker(self, make_machine):
        machine = make_machine(tick_interval=0.01)
        machine.start()
        machine.reset()
        assert not machine._ticker.running
