"""
Transition table: legal moves, feedback requirement and the status-config payload.
"""
from hypothesis import given, strategies as st

from portal import status_flow
from portal.models import ApplicationStatus as S

statuses = st.sampled_from(list(S))

HAPPY_PATH = [S.PENDING, S.REVIEWING, S.SHORTLISTED, S.INTERVIEWED, S.OFFERED, S.ACCEPTED]


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(status_flow.TRANSITIONS) == set(S)

    def test_happy_path_steps_are_allowed(self):
        for current, nxt in zip(HAPPY_PATH, HAPPY_PATH[1:]):
            assert status_flow.can_transition(current, nxt)

    def test_terminal_states(self):
        assert status_flow.is_terminal(S.ACCEPTED)
        assert status_flow.is_terminal(S.REJECTED)
        assert not status_flow.is_terminal(S.PENDING)

    def test_interviewed_cannot_jump_to_accepted(self):
        assert not status_flow.can_transition(S.INTERVIEWED, S.ACCEPTED)

    def test_accepted_cannot_be_rejected(self):
        assert not status_flow.can_transition(S.ACCEPTED, S.REJECTED)

    def test_string_values_are_accepted(self):
        assert status_flow.can_transition('PENDING', 'reviewing')
        assert status_flow.parse_status(' shortlisted ') == S.SHORTLISTED

    def test_unknown_status_is_never_a_legal_target(self):
        assert status_flow.parse_status('HIRED') is None
        assert not status_flow.can_transition(S.PENDING, 'HIRED')
        assert not status_flow.can_transition('HIRED', S.REVIEWING)
        assert status_flow.allowed_transitions('HIRED') == []

    @given(statuses, statuses)
    def test_can_transition_matches_table(self, current, target):
        assert status_flow.can_transition(current, target) == (target in status_flow.TRANSITIONS[current])

    @given(statuses)
    def test_rejected_reachable_from_every_non_terminal_state(self, current):
        if not status_flow.is_terminal(current):
            assert status_flow.can_transition(current, S.REJECTED)

    @given(statuses)
    def test_nothing_leads_back_to_pending(self, current):
        assert not status_flow.can_transition(current, S.PENDING)

    @given(st.lists(statuses, min_size=1, max_size=12))
    def test_legal_walks_never_revisit_a_status(self, targets):
        # Following only legal steps from PENDING, the graph is acyclic
        current = S.PENDING
        seen = [current]
        for target in targets:
            if status_flow.can_transition(current, target):
                current = target
                assert current not in seen
                seen.append(current)


class TestFeedbackRequirement:
    def test_feedback_required_targets(self):
        required = {s for s in S if status_flow.requires_feedback(s)}
        assert required == {S.REVIEWING, S.SHORTLISTED, S.INTERVIEWED, S.OFFERED, S.REJECTED}

    def test_pending_and_accepted_need_no_feedback(self):
        assert not status_flow.requires_feedback(S.PENDING)
        assert not status_flow.requires_feedback('ACCEPTED')


class TestStatusConfig:
    def test_config_lists_every_status(self):
        config = status_flow.status_config()
        assert list(config) == [s.value for s in S]

    def test_allowed_transitions_match_table(self):
        config = status_flow.status_config()
        for status in S:
            entry = config[status.value]
            assert set(entry['allowedTransitions']) == {s.value for s in status_flow.TRANSITIONS[status]}
            assert entry['requiresFeedback'] == status_flow.requires_feedback(status)
            assert entry['label'] == status.label
            assert entry['description']

    def test_allowed_transitions_order_happy_path_first(self):
        config = status_flow.status_config()
        assert config['PENDING']['allowedTransitions'] == ['REVIEWING', 'REJECTED']
        assert config['OFFERED']['allowedTransitions'] == ['ACCEPTED', 'REJECTED']
        assert config['ACCEPTED']['allowedTransitions'] == []

    def test_descriptions(self):
        config = status_flow.status_config()
        assert config['PENDING']['description'] == 'Application submitted but not yet reviewed'
        assert config['REJECTED']['description'] == 'Application has been rejected'
