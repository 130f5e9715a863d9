from __future__ import annotations

from datetime import timedelta

from mailthread.core.threads import NO_SUBJECT, ThreadingOptions, group_messages_into_threads


def _partition(threads) -> set[frozenset[str]]:  # noqa: ANN001
    return {frozenset(thread.message_ids) for thread in threads}


def test_empty_input_yields_no_threads() -> None:
    assert group_messages_into_threads([]) == []


def test_reply_scenario_groups_into_two_threads(make_message, t0) -> None:  # noqa: ANN001
    first = make_message("1", message_id="<m1>", subject="Hello", received_at=t0)
    reply = make_message(
        "2", message_id="<m2>", in_reply_to="<m1>", subject="Re: Hello", received_at=t0 + timedelta(hours=1)
    )
    unrelated = make_message("3", message_id="<m3>", subject="Unrelated", received_at=t0 + timedelta(hours=2))

    threads = group_messages_into_threads([first, reply, unrelated])

    assert len(threads) == 2
    newest, conversation = threads
    assert newest.message_ids == ["3"]
    assert conversation.message_ids == ["1", "2"]
    assert conversation.message_count == 2
    assert conversation.last_message_at == t0 + timedelta(hours=1)
    assert conversation.subject == "hello"


def test_threads_sorted_by_last_activity(make_message, t0) -> None:  # noqa: ANN001
    old = make_message("old", subject="Old topic", received_at=t0)
    new = make_message("new", subject="New topic", received_at=t0 + timedelta(hours=5))
    reply_to_old = make_message(
        "reply", subject="Re: Old topic", in_reply_to=old.message_id, received_at=t0 + timedelta(hours=9)
    )

    threads = group_messages_into_threads([new, reply_to_old, old])

    assert [thread.message_ids for thread in threads] == [["old", "reply"], ["new"]]


def test_reference_chain_is_transitive(make_message, t0) -> None:  # noqa: ANN001
    a = make_message("a", subject="Plan", sender="a@example.com", to=(), received_at=t0)
    b = make_message(
        "b", subject="Other", sender="b@example.com", to=(), in_reply_to=a.message_id,
        received_at=t0 + timedelta(days=10),
    )
    c = make_message(
        "c", subject="Third", sender="c@example.com", to=(), in_reply_to=b.message_id,
        received_at=t0 + timedelta(days=20),
    )

    threads = group_messages_into_threads([c, a, b])

    assert _partition(threads) == {frozenset({"a", "b", "c"})}


def test_message_counts_are_conserved(make_message) -> None:  # noqa: ANN001
    messages = [
        make_message("1", subject="Alpha", hours=0),
        make_message("2", subject="Re: Alpha", hours=1),
        make_message("3", subject="Beta", sender="x@example.com", to=("y@example.com",), hours=2),
        make_message("4", subject="Gamma", hours=3),
        make_message("5", subject="Alpha", hours=100),
    ]

    threads = group_messages_into_threads(messages)

    assert sum(thread.message_count for thread in threads) == len(messages)
    all_ids = [message_id for thread in threads for message_id in thread.message_ids]
    assert sorted(all_ids) == ["1", "2", "3", "4", "5"]


def test_grouping_is_idempotent(make_message) -> None:  # noqa: ANN001
    messages = [
        make_message("1", subject="Alpha", hours=0),
        make_message("2", subject="Re: Alpha", hours=1),
        make_message("3", subject="Beta", hours=2),
        make_message("4", subject="Alpha", sender="z@example.com", to=("q@example.com",), hours=3),
    ]

    assert _partition(group_messages_into_threads(messages)) == _partition(group_messages_into_threads(messages))


def test_disjoint_participants_stay_apart(make_message) -> None:  # noqa: ANN001
    a = make_message("1", subject="Invoice", sender="a@example.com", to=("b@example.com",))
    b = make_message("2", subject="Invoice", sender="c@example.com", to=("d@example.com",), hours=1)

    threads = group_messages_into_threads([a, b])

    assert _partition(threads) == {frozenset({"1"}), frozenset({"2"})}


def test_duplicate_message_ids_are_placed_once(make_message) -> None:  # noqa: ANN001
    message = make_message("1")

    threads = group_messages_into_threads([message, message])

    assert len(threads) == 1
    assert threads[0].message_ids == ["1"]


def test_first_created_thread_wins(make_message, counter_ids) -> None:  # noqa: ANN001
    first = make_message("1", subject="Lunch", sender="a@example.com", to=("b@example.com",), hours=0)
    second = make_message("2", subject="Lunch", sender="c@example.com", to=("d@example.com",), hours=1)
    bridge = make_message("3", subject="Re: Lunch", sender="b@example.com", to=("c@example.com",), hours=2)

    threads = group_messages_into_threads([first, second, bridge], id_factory=counter_ids)

    by_id = {thread.id: thread.message_ids for thread in threads}
    assert by_id == {"thread-1": ["1", "3"], "thread-2": ["2"]}


def test_thread_fields_follow_members(make_message) -> None:  # noqa: ANN001
    a = make_message("1", subject="Fwd:  Team   Offsite", sender="a@example.com", to=("b@example.com",))
    b = make_message(
        "2", subject="Re: Team Offsite", sender="b@example.com", to=("a@example.com",),
        cc=("c@example.com",), bcc=("hidden@example.com",), hours=3,
    )

    (thread,) = group_messages_into_threads([b, a])

    assert thread.subject == "team offsite"
    assert set(thread.participants) == {"a@example.com", "b@example.com", "c@example.com"}
    assert thread.message_count == len(thread.messages) == 2
    assert thread.last_message_at == b.received_at
    assert [message.id for message in thread.messages] == ["1", "2"]


def test_empty_subject_thread_gets_placeholder(make_message) -> None:  # noqa: ANN001
    (thread,) = group_messages_into_threads([make_message("1", subject="   ")])
    assert thread.subject == NO_SUBJECT


def test_subject_kept_raw_when_normalization_disabled(make_message) -> None:  # noqa: ANN001
    options = ThreadingOptions(subject_normalization=False)
    (thread,) = group_messages_into_threads([make_message("1", subject="Re: Hello")], options)
    assert thread.subject == "Re: Hello"


def test_equal_timestamps_keep_input_order(make_message, t0, counter_ids) -> None:  # noqa: ANN001
    a = make_message("a", subject="Alpha", sender="a@example.com", to=(), received_at=t0)
    b = make_message("b", subject="Beta", sender="b@example.com", to=(), received_at=t0)

    threads = group_messages_into_threads([a, b], id_factory=counter_ids)

    assert [(thread.id, thread.message_ids) for thread in threads] == [("thread-1", ["a"]), ("thread-2", ["b"])]
