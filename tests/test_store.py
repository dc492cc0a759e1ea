"""
In-memory store tests: append-only history, address uniqueness, code sequence.
"""

import threading
from datetime import timedelta
from uuid import uuid4

import pytest
from pydantic import ValidationError

from propledger.engine import AppendOnlyViolation, SequenceLockTimeout
from propledger.models import (
    ChangeType,
    HistoryAuditRecord,
    LifecycleEventRecord,
    LifecycleEventType,
    Property,
    PropertyChangeRecord,
    PropertyStatus,
    PropertyType,
)
from propledger.store import (
    PropertyAuditStore,
    PropertyCodeSequence,
    PropertyHistoryStore,
    PropertyStore,
)
from propledger.utils.time import utc_now


def make_property(**overrides) -> Property:
    fields = dict(
        property_id=uuid4(),
        codigo_propriedade="PROP-20240101-001",
        tipo_propriedade=PropertyType.CASA,
        endereco_completo="Rua das Flores, 123",
        cep="01234-567",
        bairro="Centro",
        cidade="São Paulo",
        estado="SP",
        area_total=120.0,
        quartos=3,
        valor_aluguel=3000.0,
        data_cadastro=utc_now(),
        usuario_cadastro="maria",
    )
    fields.update(overrides)
    return Property(**fields)


def make_change(property_id, **overrides) -> PropertyChangeRecord:
    fields = dict(
        change_id=uuid4(),
        property_id=property_id,
        change_date=utc_now(),
        user_responsible="maria",
        field_modified="valor_aluguel",
        previous_value="3000.00",
        new_value="3200.00",
        change_reason="Reajuste anual",
        property_status=PropertyStatus.DISPONIVEL,
        change_type=ChangeType.MUDANCAS_VALOR_ALUGUEL,
    )
    fields.update(overrides)
    return PropertyChangeRecord(**fields)


def make_event(property_id, **overrides) -> LifecycleEventRecord:
    fields = dict(
        event_id=uuid4(),
        property_id=property_id,
        event_type=LifecycleEventType.ENTRADA_INQUILINO,
        event_date=utc_now(),
        event_description="Inquilino assumiu o imóvel",
        event_impact="Propriedade ocupada",
    )
    fields.update(overrides)
    return LifecycleEventRecord(**fields)


# ============================================================================
# PropertyStore
# ============================================================================


def test_address_match_ignores_case_of_text_fields():
    store = PropertyStore()
    store.add(make_property())

    assert store.exists_by_address(
        "RUA DAS FLORES, 123", "centro", "01234-567", "SÃO PAULO", "sp"
    )
    # CEP is compared exactly
    assert not store.exists_by_address(
        "Rua das Flores, 123", "Centro", "01234-568", "São Paulo", "SP"
    )


def test_address_match_can_exclude_the_property_itself():
    store = PropertyStore()
    prop = store.add(make_property())

    assert not store.exists_by_address(
        "Rua das Flores, 123", "Centro", "01234-567", "São Paulo", "SP",
        exclude_id=prop.property_id,
    )


def test_all_returns_registration_order():
    store = PropertyStore()
    first = store.add(make_property(codigo_propriedade="PROP-20240101-001"))
    second = store.add(
        make_property(codigo_propriedade="PROP-20240101-002", endereco_completo="Rua B, 2")
    )

    assert [p.property_id for p in store.all()] == [first.property_id, second.property_id]
    assert store.count() == 2


# ============================================================================
# PropertyHistoryStore
# ============================================================================


def test_history_rejects_duplicate_change_id():
    store = PropertyHistoryStore()
    change = store.add_change(make_change(uuid4()))

    with pytest.raises(AppendOnlyViolation):
        store.add_change(change)

    assert store.count_changes() == 1


def test_history_rejects_duplicate_event_id():
    store = PropertyHistoryStore()
    event = store.add_event(make_event(uuid4()))

    with pytest.raises(AppendOnlyViolation):
        store.add_event(event)

    assert store.get_event(event.event_id) == event
    assert store.get_change(event.event_id) is None


def test_history_records_are_immutable():
    change = make_change(uuid4())

    with pytest.raises(ValidationError):
        change.new_value = "9999.00"


def test_history_reads_newest_first_per_property():
    store = PropertyHistoryStore()
    property_id = uuid4()
    now = utc_now()

    old = store.add_change(make_change(property_id, change_date=now - timedelta(days=2)))
    new = store.add_change(make_change(property_id, change_date=now))
    store.add_change(make_change(uuid4(), change_date=now))

    changes = store.changes_for(property_id)
    assert [c.change_id for c in changes] == [new.change_id, old.change_id]


def test_history_same_timestamp_latest_added_first():
    store = PropertyHistoryStore()
    property_id = uuid4()
    now = utc_now()

    first = store.add_change(make_change(property_id, change_date=now, new_value="a"))
    second = store.add_change(make_change(property_id, change_date=now, new_value="b"))
    first_event = store.add_event(make_event(property_id, event_date=now))
    second_event = store.add_event(make_event(property_id, event_date=now))

    assert [c.change_id for c in store.changes_for(property_id)] == [
        second.change_id,
        first.change_id,
    ]
    assert [e.event_id for e in store.events_for(property_id)] == [
        second_event.event_id,
        first_event.event_id,
    ]


def test_audit_same_timestamp_latest_added_first():
    store = PropertyAuditStore()
    property_id = uuid4()
    now = utc_now()

    audits = [
        store.add(
            HistoryAuditRecord(
                audit_id=uuid4(),
                user_id="maria",
                consulted_property_id=property_id,
                consultation_timestamp=now,
                records_returned=n,
            )
        )
        for n in range(3)
    ]

    expected = [a.audit_id for a in reversed(audits)]
    assert [a.audit_id for a in store.for_property(property_id)] == expected
    assert [a.audit_id for a in store.for_user("maria")] == expected


# ============================================================================
# PropertyAuditStore
# ============================================================================


def test_audit_store_filters_by_property_and_user():
    store = PropertyAuditStore()
    property_id = uuid4()
    now = utc_now()

    for offset, user in enumerate(["maria", "joao", "maria"]):
        store.add(
            HistoryAuditRecord(
                audit_id=uuid4(),
                user_id=user,
                consulted_property_id=property_id,
                consultation_timestamp=now + timedelta(seconds=offset),
                records_returned=0,
            )
        )

    assert len(store.for_property(property_id)) == 3
    assert len(store.for_user("maria")) == 2
    assert store.for_property(uuid4()) == []


def test_audit_store_is_append_only():
    store = PropertyAuditStore()
    audit = store.add(
        HistoryAuditRecord(
            audit_id=uuid4(),
            user_id="maria",
            consulted_property_id=uuid4(),
            consultation_timestamp=utc_now(),
            records_returned=1,
        )
    )

    with pytest.raises(AppendOnlyViolation):
        store.add(audit)


# ============================================================================
# PropertyCodeSequence
# ============================================================================


def test_sequence_is_per_day():
    seq = PropertyCodeSequence()

    assert seq.next("20240101") == 1
    assert seq.next("20240101") == 2
    assert seq.next("20240102") == 1
    assert seq.current("20240101") == 2
    assert seq.current("20240103") == 0


def test_sequence_is_unique_under_concurrency():
    seq = PropertyCodeSequence()
    issued = []
    issued_lock = threading.Lock()

    def reserve():
        for _ in range(50):
            value = seq.next("20240101")
            with issued_lock:
                issued.append(value)

    threads = [threading.Thread(target=reserve) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(issued) == list(range(1, 401))


def test_sequence_times_out_when_day_is_locked():
    seq = PropertyCodeSequence(lock_timeout_seconds=0.05)
    day_lock = seq._day_lock("20240101")
    day_lock.acquire()
    try:
        with pytest.raises(SequenceLockTimeout) as exc_info:
            seq.next("20240101")
    finally:
        day_lock.release()

    assert exc_info.value.status_code == 503
    assert exc_info.value.code == "LOCK_TIMEOUT"
    assert seq.next("20240101") == 1
