#!/usr/bin/env python3
"""
数据库CRUD操作测试

验证参与者模型的创建、读取、更新、删除，以及数据库层面的姓名唯一约束。
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from participation.crud.crud_participant import participant
from participation.models.participant import Participant
from participation.schemas.participant import CreateParticipantDto, UpdateParticipantDto


def test_participant_crud(db):
    """测试Participant模型的CRUD操作"""
    created = participant.create(
        db, obj_in=CreateParticipantDto(firstName="John", lastName="Doe", participation=40)
    )

    # 验证创建结果
    assert created.id
    assert created.first_name == "John"
    assert created.last_name == "Doe"
    assert created.participation == 40
    assert created.created_at is not None
    assert created.updated_at is not None

    # 查询参与者
    retrieved = participant.get(db, created.id)
    assert retrieved is not None
    assert isinstance(retrieved, Participant)
    assert len(participant.get_all_newest_first(db)) == 1

    # 更新参与者
    update_data = UpdateParticipantDto(firstName="Johnny", lastName="Doe", participation=45)
    updated = participant.update(db, db_obj=retrieved, obj_in=update_data)
    assert updated.first_name == "Johnny"
    assert updated.participation == 45

    # 删除参与者
    deleted = participant.remove(db, obj_id=created.id)
    assert deleted is not None
    assert participant.get(db, created.id) is None
    assert participant.remove(db, obj_id=created.id) is None

    # 更新已删除（None）的对象应该抛出异常
    with pytest.raises(TypeError):
        participant.update(db, db_obj=None, obj_in=update_data)


def test_get_returns_none_for_missing_or_none_id(db):
    assert participant.get(db, "does-not-exist") is None
    assert participant.get(db, None) is None


def test_ids_are_unique_uuids(db):
    first = participant.create(db, obj_in={"first_name": "John", "last_name": "Doe", "participation": 10})
    second = participant.create(db, obj_in={"first_name": "Jane", "last_name": "Doe", "participation": 10})
    assert first.id != second.id
    assert len(first.id) == 36


def test_get_all_newest_first(db):
    now = datetime.now(timezone.utc)
    for offset, name in [(2, "Oldest"), (0, "Newest"), (1, "Middle")]:
        participant.create(
            db,
            obj_in={
                "first_name": name,
                "last_name": "Person",
                "participation": 10,
                "created_at": now - timedelta(minutes=offset),
            },
        )

    names = [p.first_name for p in participant.get_all_newest_first(db)]
    assert names == ["Newest", "Middle", "Oldest"]


def test_participation_total(db):
    assert participant.get_participation_total(db) == 0
    keep = participant.create(db, obj_in={"first_name": "John", "last_name": "Doe", "participation": 30})
    participant.create(db, obj_in={"first_name": "Jane", "last_name": "Doe", "participation": 25.5})
    assert participant.get_participation_total(db) == 55.5
    assert participant.get_participation_total(db, exclude_id=keep.id) == 25.5


def test_get_by_name_ignores_case(db):
    created = participant.create(db, obj_in={"first_name": "John", "last_name": "Doe", "participation": 30})
    assert participant.get_by_name(db, first_name="JOHN", last_name="doe").id == created.id
    assert participant.get_by_name(db, first_name="John", last_name="Doe", exclude_id=created.id) is None


def test_unique_index_rejects_duplicate_names(db):
    """即使绕过业务校验，数据库唯一索引也会拒绝重名（不区分大小写）"""
    participant.create(db, obj_in={"first_name": "John", "last_name": "Doe", "participation": 30})
    with pytest.raises(IntegrityError):
        participant.create(db, obj_in={"first_name": "john", "last_name": "DOE", "participation": 10})
    db.rollback()
    assert len(participant.get_all_newest_first(db)) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
