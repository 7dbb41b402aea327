"""Task lifecycle management.

A task moves pending -> in_progress (executed) -> completed (thanked). The
thank transition awards the executor exactly one point.

Both transitions are written as conditional updates on the expected prior
status, so two concurrent requests cannot both win:

- execute succeeds only from ``pending``. Repeating it as the current
  executor is a no-op. Any other member gets ``TaskAlreadyExecutedError``.
- thank succeeds only from ``in_progress``. Thanking a completed task raises
  ``TaskAlreadyCompletedError`` and awards nothing.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from core.exceptions import (
    BadRequestError,
    TaskAlreadyCompletedError,
    TaskAlreadyExecutedError,
    TaskNotExecutedError,
    TaskNotFoundError,
)
from models.base import utcnow
from models.task import (
    TASK_STATUS_COMPLETED,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_PENDING,
    TaskModel,
)
from models.user import UserModel
from utils.group_manager import GroupManager

logger = logging.getLogger(__name__)


class TaskManager:
    """Manages tasks and their execute/thank transitions."""

    def __init__(self, db: Session):
        self.db = db
        self.groups = GroupManager(db)

    def list_tasks(
        self, group_id: int
    ) -> List[Tuple[TaskModel, Optional[str], Optional[str], Optional[str]]]:
        """List a group's tasks, newest first.

        Returns:
            Tuples of (task, creator name, executor name, thanked name).
        """
        creator = aliased(UserModel)
        executor = aliased(UserModel)
        thanked = aliased(UserModel)
        return (
            self.db.query(
                TaskModel,
                creator.display_name,
                executor.display_name,
                thanked.display_name,
            )
            .outerjoin(creator, creator.id == TaskModel.creator_user_id)
            .outerjoin(executor, executor.id == TaskModel.executor_user_id)
            .outerjoin(thanked, thanked.id == TaskModel.thanked_user_id)
            .filter(TaskModel.group_id == group_id)
            .order_by(TaskModel.created_at.desc(), TaskModel.id.desc())
            .all()
        )

    def get_task(self, task_id: int) -> TaskModel:
        task = self.db.query(TaskModel).filter(TaskModel.id == task_id).first()
        if task is None:
            raise TaskNotFoundError()
        return task

    def create_task(
        self,
        group_id: int,
        title: str,
        line_user_id: str,
        display_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> TaskModel:
        """Create a pending task on behalf of a group member.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        self.groups.get_group(group_id)
        creator = self.groups.ensure_user(line_user_id, display_name, group_id)

        task = TaskModel(
            group_id=group_id,
            title=title,
            description=description,
            creator_user_id=creator.id,
            status=TASK_STATUS_PENDING,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info("Created task %s in group %s by user %s", task.id, group_id, creator.id)
        return task

    def _load_for_transition(self, task_id: int, group_id: Optional[int]) -> TaskModel:
        task = self.get_task(task_id)
        if group_id is not None and group_id != task.group_id:
            raise BadRequestError("groupId does not match the task's group")
        return task

    def execute_task(
        self,
        task_id: int,
        line_user_id: str,
        display_name: Optional[str] = None,
        group_id: Optional[int] = None,
    ) -> TaskModel:
        """Mark a task as being executed by the acting member.

        Args:
            task_id: Task ID.
            line_user_id: LINE user ID of the member taking the task.
            display_name: Name used if the member is seen for the first time.
            group_id: Optional group ID sent by the client; must match the task.

        Returns:
            The updated TaskModel.

        Raises:
            TaskNotFoundError: If the task does not exist.
            BadRequestError: If group_id does not match the task.
            TaskAlreadyExecutedError: If another member is executing it.
            TaskAlreadyCompletedError: If the task is already completed.
        """
        task = self._load_for_transition(task_id, group_id)

        # A rejected call must not register the caller as a member.
        if task.status == TASK_STATUS_COMPLETED:
            raise TaskAlreadyCompletedError()
        if task.status == TASK_STATUS_IN_PROGRESS:
            user = self.groups.find_user(line_user_id, task.group_id)
            if user is not None and task.executor_user_id == user.id:
                return task
            raise TaskAlreadyExecutedError()

        user = self.groups.ensure_user(line_user_id, display_name, task.group_id)
        try:
            updated = (
                self.db.query(TaskModel)
                .filter(
                    TaskModel.id == task.id,
                    TaskModel.status == TASK_STATUS_PENDING,
                )
                .update(
                    {
                        TaskModel.executor_user_id: user.id,
                        TaskModel.executed_at: utcnow(),
                        TaskModel.status: TASK_STATUS_IN_PROGRESS,
                    },
                    synchronize_session=False,
                )
            )
            if updated != 1:
                self.db.rollback()
                raise TaskAlreadyExecutedError()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(task)
        logger.info("Task %s executed by user %s", task.id, user.id)
        return task

    def thank_task(
        self,
        task_id: int,
        line_user_id: str,
        display_name: Optional[str] = None,
        group_id: Optional[int] = None,
    ) -> TaskModel:
        """Thank the executor of a task, completing it and awarding one point.

        Args:
            task_id: Task ID.
            line_user_id: LINE user ID of the member saying thanks.
            display_name: Name used if the member is seen for the first time.
            group_id: Optional group ID sent by the client; must match the task.

        Returns:
            The updated TaskModel.

        Raises:
            TaskNotFoundError: If the task does not exist.
            BadRequestError: If group_id does not match the task.
            TaskNotExecutedError: If nobody has executed the task yet.
            TaskAlreadyCompletedError: If the task was already thanked.
        """
        task = self._load_for_transition(task_id, group_id)
        if task.executor_user_id is None:
            raise TaskNotExecutedError()
        if task.status == TASK_STATUS_COMPLETED:
            raise TaskAlreadyCompletedError()

        executor_id = task.executor_user_id
        thanker = self.groups.ensure_user(line_user_id, display_name, task.group_id)

        try:
            updated = (
                self.db.query(TaskModel)
                .filter(
                    TaskModel.id == task.id,
                    TaskModel.status == TASK_STATUS_IN_PROGRESS,
                    TaskModel.executor_user_id == executor_id,
                )
                .update(
                    {
                        TaskModel.thanked_user_id: thanker.id,
                        TaskModel.thanked_at: utcnow(),
                        TaskModel.status: TASK_STATUS_COMPLETED,
                    },
                    synchronize_session=False,
                )
            )
            if updated != 1:
                self.db.rollback()
                raise TaskAlreadyCompletedError()

            self.db.query(UserModel).filter(UserModel.id == executor_id).update(
                {UserModel.points: UserModel.points + 1},
                synchronize_session=False,
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(task)
        logger.info(
            "Task %s thanked by user %s; awarded a point to user %s",
            task.id,
            thanker.id,
            executor_id,
        )
        return task

    def delete_task(self, task_id: int) -> None:
        """Delete a task. Points already awarded for it are kept."""
        task = self.get_task(task_id)
        self.db.delete(task)
        self.db.commit()
        logger.info("Deleted task: %s", task_id)
