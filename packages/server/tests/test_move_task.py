"""Integration tests for the task move endpoint."""
import pytest
from httpx import AsyncClient

from app.ordering import next_order


async def _move(client: AsyncClient, task_id: str, column_id: str, order: int, **kwargs):
    return await client.post(
        f"/v1/tasks/{task_id}/move", json={"columnId": column_id, "order": order}, **kwargs
    )


@pytest.mark.asyncio
async def test_move_last_task_to_top(client: AsyncClient, make_board, add_task, column_layout):
    """A(0) B(1) C(2); moving C to 0 gives C(0) A(1) B(2)."""
    project_id, columns = await make_board()
    todo = columns["To Do"]
    await add_task(project_id, todo, "A")
    await add_task(project_id, todo, "B")
    c = await add_task(project_id, todo, "C")

    response = await _move(client, c["id"], todo, 0)

    assert response.status_code == 200
    assert response.json()["order"] == 0
    assert await column_layout(project_id, todo) == [("C", 0), ("A", 1), ("B", 2)]


@pytest.mark.asyncio
async def test_move_up_places_task_at_rank(client: AsyncClient, make_board, add_task, column_layout):
    project_id, columns = await make_board()
    todo = columns["To Do"]
    for title in "ABCD":
        task = await add_task(project_id, todo, title)

    await _move(client, task["id"], todo, 1)

    layout = await column_layout(project_id, todo)
    assert [title for title, _ in layout] == ["A", "D", "B", "C"]
    assert layout[0] == ("A", 0)


@pytest.mark.asyncio
async def test_move_down_lands_before_drop_target(client: AsyncClient, make_board, add_task, column_layout):
    """Dropping A onto C (order 2) puts A directly ahead of C."""
    project_id, columns = await make_board()
    todo = columns["To Do"]
    a = await add_task(project_id, todo, "A")
    for title in "BCD":
        await add_task(project_id, todo, title)

    await _move(client, a["id"], todo, 2)

    assert await column_layout(project_id, todo) == [
        ("B", 1),
        ("A", 2),
        ("C", 3),
        ("D", 4),
    ]


@pytest.mark.asyncio
async def test_move_to_own_position_changes_nothing(client: AsyncClient, make_board, add_task, column_layout):
    project_id, columns = await make_board()
    todo = columns["To Do"]
    await add_task(project_id, todo, "A")
    b = await add_task(project_id, todo, "B")

    response = await _move(client, b["id"], todo, 1)

    assert response.status_code == 200
    assert await column_layout(project_id, todo) == [("A", 0), ("B", 1)]


@pytest.mark.asyncio
async def test_move_to_empty_column(client: AsyncClient, make_board, add_task, column_layout):
    """Source column keeps its orders; the task becomes order 0 in the empty column."""
    project_id, columns = await make_board()
    todo, done = columns["To Do"], columns["Done"]
    await add_task(project_id, todo, "A")
    await add_task(project_id, todo, "B")
    c = await add_task(project_id, todo, "C")

    response = await _move(client, c["id"], done, 0)

    assert response.status_code == 200
    data = response.json()
    assert data["order"] == 0
    assert data["column"] == {"id": done, "name": "Done", "order": 2}
    assert await column_layout(project_id, done) == [("C", 0)]
    assert await column_layout(project_id, todo) == [("A", 0), ("B", 1)]


@pytest.mark.asyncio
async def test_cross_column_move_renumbers_destination(client: AsyncClient, make_board, add_task, column_layout):
    project_id, columns = await make_board()
    todo, doing = columns["To Do"], columns["In Progress"]
    a = await add_task(project_id, todo, "A")
    await add_task(project_id, todo, "B")
    await add_task(project_id, doing, "P")
    await add_task(project_id, doing, "Q")

    await _move(client, a["id"], doing, 1)

    assert await column_layout(project_id, doing) == [("P", 0), ("A", 1), ("Q", 2)]
    # Source keeps its gap
    assert await column_layout(project_id, todo) == [("B", 1)]


@pytest.mark.asyncio
async def test_drop_on_column_body_appends(client: AsyncClient, make_board, add_task, column_layout):
    project_id, columns = await make_board()
    todo, done = columns["To Do"], columns["Done"]
    a = await add_task(project_id, todo, "A")
    await add_task(project_id, done, "X")
    await add_task(project_id, done, "Y")

    # Appending sends the order after the destination's last task
    await _move(client, a["id"], done, 2)

    assert await column_layout(project_id, done) == [("X", 0), ("Y", 1), ("A", 2)]


@pytest.mark.asyncio
async def test_drop_on_gapped_column_body_appends(client: AsyncClient, make_board, add_task, column_layout):
    """Done holds B(1) C(2) after A was deleted; X dropped on its body goes last."""
    project_id, columns = await make_board()
    todo, done = columns["To Do"], columns["Done"]
    x = await add_task(project_id, todo, "X")
    a = await add_task(project_id, done, "A")
    await add_task(project_id, done, "B")
    await add_task(project_id, done, "C")
    response = await client.delete(f"/v1/projects/{project_id}/tasks/{a['id']}")
    assert response.status_code == 200

    end = next_order(order for _, order in await column_layout(project_id, done))
    assert end == 3
    await _move(client, x["id"], done, end)

    assert await column_layout(project_id, done) == [("B", 1), ("C", 2), ("X", 3)]


@pytest.mark.asyncio
async def test_drop_on_own_gapped_column_moves_to_end(client: AsyncClient, make_board, add_task, column_layout):
    project_id, columns = await make_board()
    done = columns["Done"]
    a = await add_task(project_id, done, "A")
    b = await add_task(project_id, done, "B")
    await add_task(project_id, done, "C")
    await client.delete(f"/v1/projects/{project_id}/tasks/{a['id']}")

    others = [order for title, order in await column_layout(project_id, done) if title != "B"]
    await _move(client, b["id"], done, next_order(others))

    assert await column_layout(project_id, done) == [("C", 2), ("B", 3)]


@pytest.mark.asyncio
async def test_order_past_end_is_accepted(client: AsyncClient, make_board, add_task, column_layout):
    project_id, columns = await make_board()
    todo = columns["To Do"]
    a = await add_task(project_id, todo, "A")
    await add_task(project_id, todo, "B")

    response = await _move(client, a["id"], todo, 50)

    assert response.status_code == 200
    assert await column_layout(project_id, todo) == [("B", 1), ("A", 50)]


@pytest.mark.asyncio
async def test_repeated_moves_never_duplicate_orders(client: AsyncClient, make_board, add_task):
    project_id, columns = await make_board()
    todo, doing = columns["To Do"], columns["In Progress"]
    tasks = [await add_task(project_id, todo, f"T{i}") for i in range(5)]

    plan = [
        (tasks[4], todo, 0),
        (tasks[0], doing, 0),
        (tasks[2], doing, 0),
        (tasks[1], todo, 1),
        (tasks[3], doing, 1),
        (tasks[0], todo, 0),
    ]
    for task, column_id, order in plan:
        response = await _move(client, task["id"], column_id, order)
        assert response.status_code == 200

        listed = (await client.get(f"/v1/projects/{project_id}/tasks")).json()
        pairs = [(t["column"]["id"], t["order"]) for t in listed]
        assert len(pairs) == len(set(pairs))


@pytest.mark.asyncio
async def test_move_unknown_task(client: AsyncClient, make_board):
    _, columns = await make_board()

    response = await _move(client, "task_missing", columns["Done"], 0)

    assert response.status_code == 404
    assert response.json()["detail"] == "Task task_missing not found"


@pytest.mark.asyncio
async def test_move_to_unknown_column(client: AsyncClient, make_board, add_task, column_layout):
    project_id, columns = await make_board()
    a = await add_task(project_id, columns["To Do"], "A")

    response = await _move(client, a["id"], "col_missing", 0)

    assert response.status_code == 404
    assert response.json()["detail"] == "Column col_missing not found"
    assert await column_layout(project_id, columns["To Do"]) == [("A", 0)]


@pytest.mark.asyncio
async def test_move_to_column_of_another_project(client: AsyncClient, make_board, add_task):
    first, first_columns = await make_board("First")
    _, second_columns = await make_board("Second")
    a = await add_task(first, first_columns["To Do"], "A")

    response = await _move(client, a["id"], second_columns["To Do"], 0)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_move_other_users_task(client: AsyncClient, make_board, add_task, register, column_layout):
    project_id, columns = await make_board()
    a = await add_task(project_id, columns["To Do"], "A")
    bob = await register("bob@example.com")

    response = await _move(client, a["id"], columns["Done"], 0, headers=bob)

    assert response.status_code == 404
    assert await column_layout(project_id, columns["To Do"]) == [("A", 0)]


@pytest.mark.asyncio
async def test_move_rejects_negative_order(client: AsyncClient, make_board, add_task):
    project_id, columns = await make_board()
    a = await add_task(project_id, columns["To Do"], "A")

    response = await _move(client, a["id"], columns["To Do"], -1)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_move_requires_column_and_order(client: AsyncClient, make_board, add_task):
    project_id, columns = await make_board()
    a = await add_task(project_id, columns["To Do"], "A")

    response = await client.post(f"/v1/tasks/{a['id']}/move", json={"order": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_move_requires_authentication(anon_client: AsyncClient):
    response = await anon_client.post(
        "/v1/tasks/task_x/move", json={"columnId": "col_x", "order": 0}
    )

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
