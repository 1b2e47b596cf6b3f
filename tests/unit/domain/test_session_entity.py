from bubbles_cafe.domain.entities.session import SessionRecord


def test_session_id_is_indexed_once_by_its_unique_constraint():
    table = SessionRecord.__table__

    assert table.c.session_id.unique
    indexed = [[column.name for column in index.columns] for index in table.indexes]
    assert ["session_id"] not in indexed
    assert ["expires_at"] in indexed
