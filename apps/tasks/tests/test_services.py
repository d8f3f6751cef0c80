import pytest
from datetime import timedelta
from django.utils import timezone
from apps.streaming.services import create_account
from apps.tasks.models import Task, TaskPriority, TaskStatus, TaskType
from apps.tasks.services import (
    create_task,
    update_task,
    complete_task,
    generate_subscription_expiry_tasks,
    generate_account_recharge_tasks,
    generate_payment_reminder_tasks,
    generate_all_tasks,
    TaskAssignmentError,
    InvalidTaskStateError,
)
from apps.tasks.services.task_generation import days_until


def test_days_until_rounds_up(now):
    assert days_until(now + timedelta(days=2, hours=1), now) == 3
    assert days_until(now + timedelta(days=2), now) == 2


@pytest.mark.django_db
class TestSubscriptionExpiryTasks:

    def test_close_expiry_is_high(self, expiring_subscription):
        result = generate_subscription_expiry_tasks()

        assert result == {'created': 1, 'errors': []}
        task = Task.objects.get()
        assert task.type == TaskType.SUBSCRIPTION_EXPIRY
        assert task.priority == TaskPriority.HIGH
        assert task.related_subscription == expiring_subscription
        assert task.due_date == expiring_subscription.end_date
        assert task.metadata['days_until_expiry'] == 3

    def test_later_expiry_is_medium(self, make_subscription):
        make_subscription(ends_in=timedelta(days=6))
        generate_subscription_expiry_tasks()
        assert Task.objects.get().priority == TaskPriority.MEDIUM

    def test_outside_window_ignored(self, make_subscription):
        make_subscription(ends_in=timedelta(days=10))
        assert generate_subscription_expiry_tasks()['created'] == 0

    def test_pending_subscription_ignored(self, make_subscription):
        make_subscription(ends_in=timedelta(days=2), activate=False)
        assert generate_subscription_expiry_tasks()['created'] == 0

    def test_no_duplicate_open_task(self, expiring_subscription):
        generate_subscription_expiry_tasks()
        assert generate_subscription_expiry_tasks()['created'] == 0

    def test_new_task_after_completion(self, expiring_subscription):
        generate_subscription_expiry_tasks()
        complete_task(task_id=Task.objects.get().id)
        assert generate_subscription_expiry_tasks()['created'] == 1


@pytest.mark.django_db
class TestAccountRechargeTasks:

    def test_priorities(self, netflix):
        create_account(platform_id=netflix.id, username='soon', password='x', expires_at=timezone.now() + timedelta(days=1))
        create_account(platform_id=netflix.id, username='later', password='x', expires_at=timezone.now() + timedelta(days=4))
        create_account(platform_id=netflix.id, username='far', password='x', expires_at=timezone.now() + timedelta(days=9))

        assert generate_account_recharge_tasks()['created'] == 2
        assert Task.objects.get(related_account__username='soon').priority == TaskPriority.URGENT
        assert Task.objects.get(related_account__username='later').priority == TaskPriority.HIGH
        assert generate_account_recharge_tasks()['created'] == 0


@pytest.mark.django_db
class TestPaymentReminderTasks:

    def test_old_pending_subscription(self, make_subscription, now):
        subscription = make_subscription(created_ago=timedelta(days=3), activate=False)

        assert generate_payment_reminder_tasks(now=now)['created'] == 1
        task = Task.objects.get()
        assert task.priority == TaskPriority.MEDIUM
        assert task.related_user == subscription.user
        assert task.due_date == now + timedelta(days=1)

    def test_recent_pending_subscription_ignored(self, make_subscription):
        make_subscription(created_ago=timedelta(days=1), activate=False)
        assert generate_payment_reminder_tasks()['created'] == 0


@pytest.mark.django_db
def test_generate_all_tasks(make_subscription):
    make_subscription(ends_in=timedelta(days=1))
    make_subscription(created_ago=timedelta(days=5), activate=False)

    summary = generate_all_tasks()

    assert summary['total_created'] == 2
    assert summary['subscription_expiry']['created'] == 1
    assert summary['payment_reminder']['created'] == 1
    assert summary['account_recharge']['created'] == 0
    assert summary['errors'] == []


@pytest.mark.django_db
class TestTaskManagement:

    def test_assign_to_staff(self, staff_user, admin_user):
        task = create_task(title='Appeler fournisseur', assigned_to_id=staff_user.id, created_by=admin_user)
        assert task.assigned_to == staff_user
        assert task.type == TaskType.MANUAL

    def test_cannot_assign_client(self, user):
        with pytest.raises(TaskAssignmentError):
            create_task(title='Appeler fournisseur', assigned_to_id=user.id)

    def test_update_to_completed_stamps_time(self, db):
        task = create_task(title='Inventaire')
        task = update_task(task_id=task.id, status=TaskStatus.COMPLETED, priority=TaskPriority.LOW)
        assert task.completed_at is not None
        assert task.priority == TaskPriority.LOW

        task = update_task(task_id=task.id, status=TaskStatus.IN_PROGRESS)
        assert task.completed_at is None

    def test_complete_assigns_completer(self, staff_user):
        task = complete_task(task_id=create_task(title='Inventaire').id, user=staff_user)
        assert task.status == TaskStatus.COMPLETED
        assert task.assigned_to == staff_user

    def test_complete_twice(self, db):
        task = create_task(title='Inventaire')
        complete_task(task_id=task.id)
        with pytest.raises(InvalidTaskStateError):
            complete_task(task_id=task.id)
