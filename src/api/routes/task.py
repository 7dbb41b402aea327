"""Task routes: CRUD plus the execute and thank transitions."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from core.dependencies import TaskManagerDep
from core.exceptions import BadRequestError
from schemas.task import CreateTaskRequest, TaskActionRequest, TaskInfo, TaskListItem

router = APIRouter(prefix="/api/tasks", tags=["Task"])


@router.get("", response_model=List[TaskListItem], summary="List a group's tasks")
def list_tasks(
    task_manager: TaskManagerDep,
    group_id: Optional[int] = Query(default=None, alias="groupId"),
) -> List[TaskListItem]:
    if group_id is None:
        raise BadRequestError("groupId is required")
    results = []
    for task, creator_name, executor_name, thanked_name in task_manager.list_tasks(group_id):
        item = TaskListItem.model_validate(task)
        item.creator_name = creator_name
        item.executor_name = executor_name
        item.thanked_name = thanked_name
        results.append(item)
    return results


@router.post(
    "",
    response_model=TaskInfo,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
def create_task(req: CreateTaskRequest, task_manager: TaskManagerDep) -> TaskInfo:
    """Create a pending task in a group.

    The creator is registered as a member of the group on first sight.

    Raises:
        GroupNotFoundError: If the group does not exist (404).
    """
    task = task_manager.create_task(
        group_id=req.group_id,
        title=req.title,
        description=req.description,
        line_user_id=req.line_user_id,
        display_name=req.display_name,
    )
    return TaskInfo.model_validate(task)


@router.get("/{task_id}", response_model=TaskInfo, summary="Get a task")
def get_task(task_id: int, task_manager: TaskManagerDep) -> TaskInfo:
    return TaskInfo.model_validate(task_manager.get_task(task_id))


@router.patch("/{task_id}/execute", response_model=TaskInfo, summary="Execute a task")
def execute_task(
    task_id: int,
    req: TaskActionRequest,
    task_manager: TaskManagerDep,
) -> TaskInfo:
    """Take on a pending task.

    Repeating the call as the current executor returns the task unchanged;
    any other member gets 409 once the task is taken.
    """
    task = task_manager.execute_task(
        task_id,
        line_user_id=req.line_user_id,
        display_name=req.display_name,
        group_id=req.group_id,
    )
    return TaskInfo.model_validate(task)


@router.patch("/{task_id}/thank", response_model=TaskInfo, summary="Thank a task's executor")
def thank_task(
    task_id: int,
    req: TaskActionRequest,
    task_manager: TaskManagerDep,
) -> TaskInfo:
    """Complete an executed task and award its executor one point.

    Raises:
        TaskNotExecutedError: If nobody has executed the task (400).
        TaskAlreadyCompletedError: If the task was already thanked (409).
    """
    task = task_manager.thank_task(
        task_id,
        line_user_id=req.line_user_id,
        display_name=req.display_name,
        group_id=req.group_id,
    )
    return TaskInfo.model_validate(task)


@router.delete("/{task_id}", summary="Delete a task")
def delete_task(task_id: int, task_manager: TaskManagerDep) -> dict:
    task_manager.delete_task(task_id)
    return {"success": True, "message": "Task deleted successfully"}
