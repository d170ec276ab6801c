"""
Late policy actions: list, show, new, edit, create, update, destroy.

Every action takes an explicit RequestContext (who is calling, which record,
what was submitted) and reports its outcome on that context: a flash notice or
error plus the action to redirect to. Only authorization and missing records
escape as exceptions; validation and persistence failures become flash errors.
"""
import logging
from dataclasses import dataclass, field

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import MAX_PENALTY_LIMIT
from app.core.errors import AuthorizationDenied, PolicyNotFound
from app.models.late_policy import LatePolicy
from app.models.user import User
from app.schemas.late_policy import LatePolicyParams
from app.services.penalties import update_calculated_penalty_objects

logger = logging.getLogger(__name__)

# actions open to any TA-level caller
TA_ACTIONS = frozenset({"index", "show", "new", "create"})
# actions that also require owning the record
OWNER_ACTIONS = frozenset({"edit", "update", "destroy"})

EDIT_ERROR_PREFIX = "Cannot edit the policy. "
SAVE_ERROR = "An error occurred while saving the late policy."
UPDATE_ERROR = "An error occurred while updating the late policy."
IN_USE_ERROR = "This policy is in use and hence cannot be deleted."


@dataclass(frozen=True)
class Caller:
    user_id: int
    instructor_id: int | None
    has_ta_privileges: bool

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        return cls(
            user_id=user.id,
            instructor_id=user.instructor_id,
            has_ta_privileges=user.has_ta_privileges,
        )


@dataclass(frozen=True)
class Redirect:
    action: str
    policy_id: int | None = None


@dataclass
class RequestContext:
    caller: Caller
    policy_id: int | None = None
    params: LatePolicyParams | None = None

    # outcome
    notice: str | None = None
    error: str | None = None
    redirect: Redirect | None = None

    def redirect_to(self, action: str) -> None:
        if action == "edit":
            self.redirect = Redirect(action, self.policy_id)
        else:
            self.redirect = Redirect(action)


@dataclass
class ValidationResult:
    messages: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.messages

    @property
    def message(self) -> str:
        return "\n".join(self.messages)


def resolve_owner_id(policy: LatePolicy | None, caller_instructor_id: int | None) -> int | None:
    """Owner of the record in scope, or the caller's instructor when there is none."""
    if policy is not None:
        return policy.instructor_id
    return caller_instructor_id


def action_allowed(action: str, caller: Caller, policy: LatePolicy | None = None) -> bool:
    if action in TA_ACTIONS:
        return caller.has_ta_privileges
    if action in OWNER_ACTIONS:
        owner_id = resolve_owner_id(policy, caller.instructor_id)
        return (
            caller.has_ta_privileges
            and caller.instructor_id is not None
            and caller.instructor_id == owner_id
        )
    return False


def success_notice(verb: str) -> str:
    return f"The late policy was successfully {verb}."


class LatePolicyManager:
    def __init__(self, db: Session):
        self.db = db

    # -- lookups ---------------------------------------------------------

    def find(self, policy_id: int | None) -> LatePolicy:
        policy = None
        if policy_id is not None:
            policy = self.db.query(LatePolicy).filter(LatePolicy.id == policy_id).first()
        if policy is None:
            raise PolicyNotFound(policy_id)
        return policy

    def policy_with_same_name_exists(self, policy_name: str, instructor_id: int | None) -> bool:
        return (
            self.db.query(LatePolicy.id)
            .filter(
                LatePolicy.policy_name == policy_name,
                LatePolicy.instructor_id == instructor_id,
            )
            .first()
            is not None
        )

    def authorize(self, action: str, ctx: RequestContext, policy: LatePolicy | None = None) -> None:
        if not action_allowed(action, ctx.caller, policy):
            self._deny(action, ctx)

    def load_authorized(self, action: str, ctx: RequestContext) -> LatePolicy:
        """Load the record in scope for `action`, denying unprivileged callers before any lookup."""
        if not ctx.caller.has_ta_privileges:
            self._deny(action, ctx)
        policy = self.find(ctx.policy_id)
        self.authorize(action, ctx, policy)
        return policy

    def _deny(self, action: str, ctx: RequestContext) -> None:
        logger.warning(
            "User %s denied %s on late policy %s", ctx.caller.user_id, action, ctx.policy_id
        )
        raise AuthorizationDenied(action)

    # -- validation ------------------------------------------------------

    def validate_input(self, ctx: RequestContext, existing: LatePolicy | None = None) -> ValidationResult:
        """
        Run every check and collect all messages. Passing the stored record
        makes this an update: messages get the edit prefix and an unchanged
        name skips the duplicate check.
        """
        params = ctx.params
        is_update = existing is not None
        prefix = EDIT_ERROR_PREFIX if is_update else ""
        result = ValidationResult()

        name_unchanged = is_update and existing.policy_name == params.policy_name
        if not name_unchanged:
            owner_id = resolve_owner_id(existing, ctx.caller.instructor_id)
            if self.policy_with_same_name_exists(params.policy_name, owner_id):
                result.messages.append(
                    f"{prefix}A policy with the same name {params.policy_name} already exists."
                )

        if params.max_penalty < params.penalty_per_unit or params.max_penalty > MAX_PENALTY_LIMIT:
            result.messages.append(
                f"{prefix}The maximum penalty must be between the penalty per unit and {MAX_PENALTY_LIMIT}."
            )

        if params.penalty_per_unit < 0:
            result.messages.append("Penalty per unit cannot be negative.")

        return result

    # -- read actions ----------------------------------------------------

    def list_policies(self, ctx: RequestContext) -> list[LatePolicy]:
        self.authorize("index", ctx)
        owner_id = resolve_owner_id(None, ctx.caller.instructor_id)
        return (
            self.db.query(LatePolicy)
            .filter(or_(LatePolicy.instructor_id == owner_id, LatePolicy.private.is_(False)))
            .order_by(LatePolicy.id.asc())
            .all()
        )

    def show(self, ctx: RequestContext) -> LatePolicy:
        policy = self.load_authorized("show", ctx)
        return policy

    def new(self, ctx: RequestContext) -> LatePolicy:
        self.authorize("new", ctx)
        return LatePolicy(private=True)

    def edit(self, ctx: RequestContext) -> LatePolicy:
        policy = self.load_authorized("edit", ctx)
        return policy

    # -- write actions ---------------------------------------------------

    def create(self, ctx: RequestContext) -> LatePolicy | None:
        self.authorize("create", ctx)

        result = self.validate_input(ctx)
        if not result.valid:
            logger.info("Late policy create rejected for user %s: %s", ctx.caller.user_id, result.messages)
            ctx.error = result.message
            ctx.redirect_to("new")
            return None

        policy = LatePolicy(**ctx.params.model_dump())
        policy.instructor_id = resolve_owner_id(None, ctx.caller.instructor_id)

        try:
            self.db.add(policy)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Saving late policy %r failed", ctx.params.policy_name)
            ctx.error = SAVE_ERROR
            ctx.redirect_to("new")
            return None

        self.db.refresh(policy)
        logger.info("Late policy %s created by user %s", policy.id, ctx.caller.user_id)
        ctx.notice = success_notice("created")
        ctx.redirect_to("index")
        return policy

    def update(self, ctx: RequestContext) -> LatePolicy | None:
        policy = self.load_authorized("update", ctx)

        result = self.validate_input(ctx, existing=policy)
        if not result.valid:
            logger.info("Late policy %s update rejected: %s", policy.id, result.messages)
            ctx.error = result.message
            ctx.redirect_to("edit")
            return None

        try:
            # instructor_id is not editable
            for name, value in ctx.params.model_dump().items():
                setattr(policy, name, value)
            self.db.flush()
            update_calculated_penalty_objects(self.db, policy)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Updating late policy %s failed", ctx.policy_id)
            ctx.error = UPDATE_ERROR
            ctx.redirect_to("edit")
            return None

        logger.info("Late policy %s updated by user %s", policy.id, ctx.caller.user_id)
        ctx.notice = success_notice("updated")
        ctx.redirect_to("index")
        return policy

    def destroy(self, ctx: RequestContext) -> bool:
        policy = self.load_authorized("destroy", ctx)

        try:
            self.db.delete(policy)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.info("Late policy %s is in use, not deleted", ctx.policy_id)
            ctx.error = IN_USE_ERROR
            ctx.redirect_to("index")
            return False

        logger.info("Late policy %s deleted by user %s", ctx.policy_id, ctx.caller.user_id)
        ctx.redirect_to("index")
        return True
