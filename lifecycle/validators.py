from __future__ import annotations

from typing import Dict, Optional

from stores.models import SessionUser


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def validate_draft_fields(
    block_type: Optional[str],
    sub_block: Optional[str],
    work_type: Optional[str],
    description: str,
    floor_no: str,
    wing: str,
) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not block_type:
        errors["block_type"] = "Select a block type"
    if block_type == "academic" and not sub_block:
        errors["sub_block"] = "Select a sub-block"
    if not work_type:
        errors["work_type"] = "Select work type"
    if _blank(description):
        errors["description"] = "Describe the issue"
    if _blank(floor_no):
        errors["floor_no"] = "Enter floor number"
    if _blank(wing):
        errors["wing"] = "Enter wing"
    return errors


def validate_login_fields(
    role: Optional[str],
    user_id: str = "",
    name: str = "",
    password: str = "",
) -> Dict[str, str]:
    # presence checks only, nothing is verified
    if role == "student":
        if _blank(user_id) or _blank(name):
            return {"form": "Please enter Registration Number and Name"}
    elif role == "staff":
        if _blank(user_id) or _blank(name):
            return {"form": "Please enter Staff ID and Name"}
    elif role == "admin":
        if _blank(name) or _blank(password):
            return {"form": "Please enter Name and Password"}
    else:
        return {"role": "Select your role"}
    return {}


def build_session_user(role: str, user_id: str, name: str) -> SessionUser:
    name = (name or "").strip()
    return SessionUser(id=(user_id or "").strip() or name, name=name, role=role)


def validate_closure_fields(photo: Optional[str], review: str) -> Dict[str, str]:
    if not photo:
        return {"photo": "Please upload a photo of the resolved work"}
    if _blank(review):
        return {"review": "Please write a review or remark"}
    return {}
