from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.core.current_user import get_current_user
from app.core.deps import get_db
from app.core.flash import pop_flash, set_flash
from app.core.rendering import xml_collection, xml_record
from app.models.late_policy import LatePolicy
from app.models.user import User
from app.schemas.late_policy import (
    FlashMessages,
    LatePolicyForm,
    LatePolicyFormData,
    LatePolicyFormPage,
    LatePolicyIndexPage,
    LatePolicyRead,
)
from app.services.late_policy_manager import Caller, LatePolicyManager, RequestContext

router = APIRouter()

# route name for each redirect target the manager can ask for
REDIRECT_ROUTES = {
    "index": "list_late_policies",
    "new": "new_late_policy",
    "edit": "edit_late_policy",
}


def _context(user: User, policy_id: int | None = None, form: LatePolicyForm | None = None) -> RequestContext:
    return RequestContext(
        caller=Caller.from_user(user),
        policy_id=policy_id,
        params=form.late_policy if form else None,
    )


def _finish(request: Request, ctx: RequestContext) -> RedirectResponse:
    """Store the outcome's flash and redirect to where the manager pointed."""
    set_flash(request, notice=ctx.notice, error=ctx.error)

    route_name = REDIRECT_ROUTES[ctx.redirect.action]
    if ctx.redirect.policy_id is not None:
        url = request.url_for(route_name, policy_id=ctx.redirect.policy_id)
    else:
        url = request.url_for(route_name)
    return RedirectResponse(url=str(url), status_code=status.HTTP_303_SEE_OTHER)


def _record(policy: LatePolicy) -> dict:
    return LatePolicyFormData.model_validate(policy).model_dump()


@router.get("", response_model=LatePolicyIndexPage, name="list_late_policies")
def list_late_policies(
    request: Request,
    fmt: str | None = Query(default=None, alias="format"),
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    policies = LatePolicyManager(db).list_policies(_context(me))

    if fmt == "xml":
        return xml_collection("late_policies", "late_policy", [_record(p) for p in policies])

    return LatePolicyIndexPage(
        late_policies=[LatePolicyRead.model_validate(p) for p in policies],
        flash=FlashMessages(**pop_flash(request)),
    )


@router.get("/new", response_model=LatePolicyFormPage, name="new_late_policy")
def new_late_policy(
    request: Request,
    fmt: str | None = Query(default=None, alias="format"),
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    policy = LatePolicyManager(db).new(_context(me))

    if fmt == "xml":
        return xml_record("late_policy", _record(policy))

    return LatePolicyFormPage(
        late_policy=LatePolicyFormData.model_validate(policy),
        flash=FlashMessages(**pop_flash(request)),
    )


@router.post("", name="create_late_policy")
def create_late_policy(
    request: Request,
    form: LatePolicyForm,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    ctx = _context(me, form=form)
    LatePolicyManager(db).create(ctx)
    return _finish(request, ctx)


@router.get("/{policy_id}", response_model=LatePolicyRead, name="show_late_policy")
def show_late_policy(
    policy_id: int,
    fmt: str | None = Query(default=None, alias="format"),
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    policy = LatePolicyManager(db).show(_context(me, policy_id))

    if fmt == "xml":
        return xml_record("late_policy", _record(policy))
    return policy


@router.get("/{policy_id}/edit", response_model=LatePolicyFormPage, name="edit_late_policy")
def edit_late_policy(
    policy_id: int,
    request: Request,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    policy = LatePolicyManager(db).edit(_context(me, policy_id))
    return LatePolicyFormPage(
        late_policy=LatePolicyFormData.model_validate(policy),
        flash=FlashMessages(**pop_flash(request)),
    )


@router.api_route("/{policy_id}", methods=["PUT", "PATCH"], name="update_late_policy")
def update_late_policy(
    policy_id: int,
    request: Request,
    form: LatePolicyForm,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    ctx = _context(me, policy_id, form)
    LatePolicyManager(db).update(ctx)
    return _finish(request, ctx)


@router.delete("/{policy_id}", name="destroy_late_policy")
def destroy_late_policy(
    policy_id: int,
    request: Request,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    ctx = _context(me, policy_id)
    LatePolicyManager(db).destroy(ctx)
    return _finish(request, ctx)
