"""
Test partial-update assignment building.
"""

from typing import Optional

from pydantic import BaseModel

from core.patching import build_assignments
from domain.product.schemas import PRODUCT_COLUMNS, ProductPatch
from domain.user.schemas import PROFILE_COLUMNS, ProfilePatch


def test_only_sent_fields_are_assigned():
    patch = ProfilePatch.model_validate({"firstName": "Ravi"})
    assert build_assignments(patch, PROFILE_COLUMNS) == {"first_name": "Ravi"}


def test_empty_patch_yields_no_assignments():
    assert build_assignments(ProfilePatch(), PROFILE_COLUMNS) == {}


def test_assignments_follow_column_order():
    patch = ProfilePatch.model_validate({"monthlyInvestment": 2500, "phone": "99999", "firstName": "Ravi"})
    assert list(build_assignments(patch, PROFILE_COLUMNS)) == ["first_name", "phone", "monthly_investment"]


def test_unknown_fields_never_reach_columns():
    patch = ProfilePatch.model_validate({"passwordHash": "x", "id": "other", "lastName": "K"})
    assert build_assignments(patch, PROFILE_COLUMNS) == {"last_name": "K"}


def test_explicit_null_clears_nullable_column():
    patch = ProductPatch.model_validate({"maxInvestment": None})
    assert build_assignments(patch, PRODUCT_COLUMNS) == {"max_investment": None}


def test_field_and_column_names_may_differ():
    class NicknamePatch(BaseModel):
        nickname: Optional[str] = None
        bio: Optional[str] = None

    patch = NicknamePatch(nickname="ash")
    assert build_assignments(patch, {"nickname": "display_name", "bio": "bio"}) == {"display_name": "ash"}
