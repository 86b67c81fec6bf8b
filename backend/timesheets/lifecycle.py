"""
Timesheet status workflow.

    draft/rejected --submit--> submitted --certify--> certified
    submitted/certified --approve--> admin_approved
    submitted/certified --reject--> rejected

``edit`` and ``delete`` belong to the owner while the timesheet is a draft
(``rejected`` behaves like draft). ``correct`` lets an admin fix a timesheet
after submission, including an approved one.

Every transition runs in a single transaction with the timesheet row locked,
recomputes the stored totals and writes exactly one audit entry.
"""
import logging
from collections import namedtuple

from .clock import SystemClock
from .exceptions import ActorNotPermitted, IncompleteTimesheet, InvalidTimeEntry, InvalidTransition
from .models import Timesheet
from .rules import DEFAULT_RULES
from .weekly import compute_week, normalize_week

logger = logging.getLogger(__name__)

OWNER = 'owner'
ADMIN = 'admin'
OWNER_OR_ADMIN = 'owner_or_admin'

DELETED = object()

Transition = namedtuple('Transition', ['sources', 'target', 'who', 'audit_action'])

DRAFT_STATES = (Timesheet.STATUS_DRAFT, Timesheet.STATUS_REJECTED)
REVIEW_STATES = (Timesheet.STATUS_SUBMITTED, Timesheet.STATUS_CERTIFIED)

TRANSITIONS = {
    'edit': Transition(DRAFT_STATES, None, OWNER, 'UPDATE'),
    'submit': Transition(DRAFT_STATES, Timesheet.STATUS_SUBMITTED, OWNER_OR_ADMIN, 'SUBMIT'),
    'certify': Transition((Timesheet.STATUS_SUBMITTED,), Timesheet.STATUS_CERTIFIED, ADMIN, 'CERTIFY'),
    'approve': Transition(REVIEW_STATES, Timesheet.STATUS_ADMIN_APPROVED, ADMIN, 'APPROVE'),
    'reject': Transition(REVIEW_STATES, Timesheet.STATUS_REJECTED, ADMIN, 'REJECT'),
    'correct': Transition(REVIEW_STATES + (Timesheet.STATUS_ADMIN_APPROVED,), None, ADMIN, 'CORRECT'),
    'delete': Transition((Timesheet.STATUS_DRAFT,), DELETED, OWNER, 'DELETE'),
}


def find_incomplete_days(entries, rules=DEFAULT_RULES, totals=None):
    """
    Days that block submission.

    A worked day needs both clock times. A required day that was not worked
    needs a leave type or a reason. Work on a day outside the required days
    needs a reason, and so does any day ``totals`` shows with overtime or
    double time.
    """
    premium_days = set()
    if totals is not None:
        premium_days = {
            day.day for day in totals.days if day.overtime_minutes or day.double_time_minutes
        }

    missing = []
    for entry in normalize_week(entries):
        has_reason = bool((entry.reason or '').strip())
        if entry.worked:
            if not entry.has_clock_times:
                missing.append(entry.day)
            elif not has_reason and (
                entry.day not in rules.required_days or entry.day in premium_days
            ):
                missing.append(entry.day)
        elif entry.day in rules.required_days:
            if entry.leave_type == 'none' and not has_reason:
                missing.append(entry.day)
    return missing


def merge_entries(stored, updates):
    """Apply ``updates`` over ``stored`` day entries, matching by day label."""
    by_day = {entry.day: entry for entry in stored}
    seen = set()
    for entry in updates:
        if entry.day in seen:
            raise InvalidTimeEntry(f"Day {entry.day} appears more than once", day=entry.day)
        seen.add(entry.day)
        by_day[entry.day] = entry
    return list(by_day.values())


def recompute(repository, timesheet, entries=None, rules=DEFAULT_RULES):
    """
    Recompute and store every day breakdown and the weekly totals.

    ``entries`` are upserted over the stored days by day label; stored days
    it does not mention are kept as they are.
    """
    stored = repository.day_entries(timesheet)
    if entries is not None:
        stored = merge_entries(stored, entries)
    week = normalize_week(stored)
    tail = repository.prior_week_tail(timesheet.employee_id, timesheet.week_start)
    totals = compute_week(week, tail, timesheet.compensation_class, rules)
    for entry, day_hours in zip(week, totals.days):
        repository.upsert_day(timesheet, entry, day_hours)
    repository.update_totals(timesheet, totals)
    return totals


class TimesheetLifecycle:

    def __init__(self, repository, audit, clock=None, rules=DEFAULT_RULES):
        self.repository = repository
        self.audit = audit
        self.clock = clock or SystemClock()
        self.rules = rules

    def allowed_actions(self, timesheet, actor):
        """Actions ``actor`` could take on ``timesheet`` right now."""
        allowed = []
        for action, step in TRANSITIONS.items():
            if timesheet.status in step.sources and self._actor_permitted(step, timesheet, actor):
                allowed.append(action)
        return allowed

    def transition(self, timesheet, action, actor, **payload):
        """
        Apply ``action`` to ``timesheet`` on behalf of ``actor``.

        Returns the updated timesheet, or ``None`` after ``delete``. Raises
        ``InvalidTransition`` when the current status does not allow the
        action and ``ActorNotPermitted`` when the actor may not take it.
        Nothing is persisted when any step fails.
        """
        step = TRANSITIONS.get(action)
        if step is None:
            raise InvalidTransition(f"Unknown action: {action}")

        handler = getattr(self, f'_{action}')

        with self.repository.atomic():
            locked = self.repository.lock(timesheet.pk)
            if locked.status not in step.sources:
                raise InvalidTransition(
                    f"Cannot {action} a timesheet in status {locked.status}"
                )
            if not self._actor_permitted(step, locked, actor):
                raise ActorNotPermitted(f"Not permitted to {action} this timesheet")

            old_status = locked.status
            detail = handler(locked, actor, **payload)
            new_status = 'deleted' if step.target is DELETED else locked.status

            self.audit.record(
                actor,
                step.audit_action,
                locked,
                detail,
                field_name='status',
                old_value=old_status,
                new_value=new_status,
                timestamp=self.clock.now(),
            )
            if step.target is DELETED:
                self.repository.delete(locked)

        logger.info(
            f"Timesheet #{timesheet.pk} {action} by user {actor.id}: {old_status} -> {new_status}"
        )
        return None if step.target is DELETED else locked

    def _actor_permitted(self, step, timesheet, actor):
        if step.who == OWNER:
            return actor.owns(timesheet)
        if step.who == ADMIN:
            return actor.is_admin
        return actor.owns(timesheet) or actor.is_admin

    def _touch(self, timesheet, actor, **fields):
        fields['last_updated_by_id'] = actor.id
        self.repository.update_status(timesheet, **fields)

    def _replace_content(self, timesheet, entries, expenses):
        if expenses is not None:
            self.repository.replace_expenses(timesheet, expenses)
        return recompute(self.repository, timesheet, entries, self.rules)

    def _edit(self, timesheet, actor, entries=None, expenses=None, certified=None):
        totals = self._replace_content(timesheet, entries, expenses)
        fields = {}
        if certified is not None:
            fields['certified'] = bool(certified)
        self._touch(timesheet, actor, **fields)
        return f"Updated timesheet ({totals.total_hours} hours)"

    def _submit(self, timesheet, actor, certified=None):
        if certified is not None:
            timesheet.certified = bool(certified)
        if not timesheet.certified:
            raise IncompleteTimesheet("The employee must certify the timesheet before submitting")

        entries = self.repository.day_entries(timesheet)
        totals = recompute(self.repository, timesheet, rules=self.rules)
        missing = find_incomplete_days(entries, self.rules, totals)
        if missing:
            raise IncompleteTimesheet(
                f"Missing entries or reasons for: {', '.join(day.capitalize() for day in missing)}",
                missing_days=missing,
            )

        self._touch(
            timesheet,
            actor,
            status=Timesheet.STATUS_SUBMITTED,
            certified=True,
            submitted_at=self.clock.now(),
        )
        on_behalf = '' if actor.owns(timesheet) else f" on behalf of employee {timesheet.employee_id}"
        return f"Submitted timesheet{on_behalf} ({totals.total_hours} hours)"

    def _certify(self, timesheet, actor):
        self._touch(timesheet, actor, status=Timesheet.STATUS_CERTIFIED)
        return "Certified timesheet for approval"

    def _approve(self, timesheet, actor, approved=False):
        if approved is not True:
            raise InvalidTransition("Approval must be confirmed with approved=true")
        if actor.id is None:
            raise ActorNotPermitted("Approval requires an approver")

        recompute(self.repository, timesheet, rules=self.rules)
        self._touch(
            timesheet,
            actor,
            status=Timesheet.STATUS_ADMIN_APPROVED,
            admin_approved=True,
            approved_at=self.clock.now(),
            approved_by_id=actor.id,
        )
        return f"Approved timesheet for week of {timesheet.week_start}"

    def _reject(self, timesheet, actor, reason=None):
        reason = (reason or '').strip()
        if not reason:
            raise InvalidTransition("A rejection reason is required")

        stamp = self.clock.now().strftime('%Y-%m-%d %H:%M')
        note = f"[{stamp}] Rejected by {actor.name or actor.id}: {reason}"
        notes = f"{timesheet.admin_notes}\n{note}" if timesheet.admin_notes else note

        self._touch(
            timesheet,
            actor,
            status=Timesheet.STATUS_REJECTED,
            rejection_reason=reason,
            admin_notes=notes,
            admin_approved=False,
            approved_at=None,
            approved_by_id=None,
        )
        return f"Rejected: {reason}"

    def _correct(self, timesheet, actor, entries=None, expenses=None, admin_notes=None):
        totals = self._replace_content(timesheet, entries, expenses)
        fields = {}
        if admin_notes is not None:
            fields['admin_notes'] = admin_notes
        self._touch(timesheet, actor, **fields)
        return f"Corrected by admin ({totals.total_hours} hours)"

    def _delete(self, timesheet, actor):
        return f"Deleted draft timesheet for week of {timesheet.week_start}"
