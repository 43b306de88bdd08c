from __future__ import annotations

# Public API surface (v1): keep stable imports for tests and downstream tools.

from .arith import (
    op_add_v1,
    op_div_reveal_v1,
    op_div_v1,
    op_mul_v1,
    op_neg_v1,
    op_rem_reveal_v1,
    op_rem_v1,
    op_sub_v1,
)
from .bitwise import op_and_v1, op_not_v1, op_or_v1, op_shl_v1, op_shr_v1, op_xor_v1
from .boolean import (
    op_bool_and_v1,
    op_bool_decrypt_v1,
    op_bool_eq_v1,
    op_bool_mux_v1,
    op_bool_ne_v1,
    op_bool_not_v1,
    op_bool_or_v1,
    op_bool_set_public_v1,
    op_bool_validate_v1,
    op_bool_xor_v1,
)
from .boundary import (
    WideCiphertext,
    WideUserCiphertext,
    op_decrypt_v1,
    op_offboard_combined_v1,
    op_offboard_to_user_v1,
    op_offboard_v1,
    op_onboard_v1,
    op_random_bounded_v1,
    op_random_v1,
    op_set_public_v1,
    op_validate_ciphertext_v1,
)
from .checked import (
    op_checked_add_v1,
    op_checked_add_with_overflow_bit_v1,
    op_checked_mul_v1,
    op_checked_mul_with_overflow_bit_v1,
    op_checked_sub_v1,
    op_checked_sub_with_overflow_bit_v1,
)
from .client import UserAccount
from .compare import (
    PRED_EQ,
    PRED_GE,
    PRED_GT,
    PRED_LE,
    PRED_LT,
    PRED_NE,
    op_cmp_v1,
    op_eq_v1,
    op_ge_v1,
    op_gt_v1,
    op_le_v1,
    op_lt_v1,
    op_max_v1,
    op_min_v1,
    op_ne_v1,
)
from .errors import ArithmeticOverflow, BackendError, DivisionByZero, InvalidProof, MPCIntError
from .limbs import (
    INT8,
    INT16,
    INT32,
    INT64,
    INT128,
    INT256,
    MODE_PUBLIC_LHS,
    MODE_PUBLIC_RHS,
    MODE_SECRET,
    UINT8,
    UINT16,
    UINT32,
    UINT64,
    UINT128,
    UINT256,
    WIDTHS,
    IntType,
    WideValue,
    op_fits_in_limbs_v1,
)
from .local_backend import LocalRSSBackend
from .mux import op_select_v1
from .words import Ciphertext, InputProof, SecretWord, UserCiphertext, WordBackend

__all__ = [
    "op_add_v1",
    "op_sub_v1",
    "op_mul_v1",
    "op_neg_v1",
    "op_div_v1",
    "op_rem_v1",
    "op_div_reveal_v1",
    "op_rem_reveal_v1",
    "op_and_v1",
    "op_or_v1",
    "op_xor_v1",
    "op_not_v1",
    "op_shl_v1",
    "op_shr_v1",
    "op_bool_set_public_v1",
    "op_bool_decrypt_v1",
    "op_bool_validate_v1",
    "op_bool_and_v1",
    "op_bool_or_v1",
    "op_bool_xor_v1",
    "op_bool_not_v1",
    "op_bool_eq_v1",
    "op_bool_ne_v1",
    "op_bool_mux_v1",
    "WideCiphertext",
    "WideUserCiphertext",
    "op_validate_ciphertext_v1",
    "op_set_public_v1",
    "op_decrypt_v1",
    "op_random_v1",
    "op_random_bounded_v1",
    "op_offboard_v1",
    "op_onboard_v1",
    "op_offboard_to_user_v1",
    "op_offboard_combined_v1",
    "op_checked_add_v1",
    "op_checked_sub_v1",
    "op_checked_mul_v1",
    "op_checked_add_with_overflow_bit_v1",
    "op_checked_sub_with_overflow_bit_v1",
    "op_checked_mul_with_overflow_bit_v1",
    "UserAccount",
    "PRED_EQ",
    "PRED_GE",
    "PRED_GT",
    "PRED_LE",
    "PRED_LT",
    "PRED_NE",
    "op_cmp_v1",
    "op_eq_v1",
    "op_ne_v1",
    "op_lt_v1",
    "op_le_v1",
    "op_gt_v1",
    "op_ge_v1",
    "op_min_v1",
    "op_max_v1",
    "MPCIntError",
    "InvalidProof",
    "DivisionByZero",
    "ArithmeticOverflow",
    "BackendError",
    "WIDTHS",
    "IntType",
    "WideValue",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
    "UINT128",
    "UINT256",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "INT128",
    "INT256",
    "MODE_SECRET",
    "MODE_PUBLIC_LHS",
    "MODE_PUBLIC_RHS",
    "op_fits_in_limbs_v1",
    "LocalRSSBackend",
    "op_select_v1",
    "SecretWord",
    "Ciphertext",
    "UserCiphertext",
    "InputProof",
    "WordBackend",
]
