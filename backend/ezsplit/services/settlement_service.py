"""
Settlement planner for minimal debt settlement between group members.
"""
from decimal import Decimal
from typing import List, Tuple
from ezsplit.core.utils import quantize_money, to_decimal
from ezsplit.services.ledger_service import Ledger

# Balances closer to zero than this are treated as settled
SETTLEMENT_TOLERANCE = Decimal("0.01")


class Transfer:
    """Represents a single transfer between users."""
    def __init__(self, from_user_id: int, to_user_id: int, amount: Decimal, related_expenses: List[str] = None):
        self.from_user_id = from_user_id
        self.to_user_id = to_user_id
        self.amount = amount
        self.related_expenses = related_expenses or []

    def __repr__(self):
        return f"Transfer({self.from_user_id} -> {self.to_user_id}: {self.amount})"


def minimize_transfers(balances: List[Tuple[int, Decimal]]) -> List[Transfer]:
    """
    Minimize the number of transfers needed to settle debts.
    
    Greedy matching: debtors sorted most negative first, creditors most
    positive first, both with a stable sort so equal balances keep input
    order. The head debtor pays the head creditor min(debt, credit) until
    one side runs out. Emits at most n_debtors + n_creditors - 1 transfers.
    """
    debtors = [[uid, to_decimal(bal)] for uid, bal in balances if to_decimal(bal) <= -SETTLEMENT_TOLERANCE]
    creditors = [[uid, to_decimal(bal)] for uid, bal in balances if to_decimal(bal) >= SETTLEMENT_TOLERANCE]
    
    debtors.sort(key=lambda x: x[1])
    creditors.sort(key=lambda x: x[1], reverse=True)
    
    transfers = []
    debt_idx = 0
    cred_idx = 0
    
    while debt_idx < len(debtors) and cred_idx < len(creditors):
        debtor = debtors[debt_idx]
        creditor = creditors[cred_idx]
        
        # Transfer the minimum of what's owed and what's needed
        transfer_amount = min(abs(debtor[1]), creditor[1])
        if transfer_amount > 0:
            transfers.append(Transfer(debtor[0], creditor[0], transfer_amount))
        
        debtor[1] += transfer_amount
        creditor[1] -= transfer_amount
        
        if abs(debtor[1]) < SETTLEMENT_TOLERANCE:
            debt_idx += 1
        if abs(creditor[1]) < SETTLEMENT_TOLERANCE:
            cred_idx += 1
    
    return transfers


def plan_settlement(ledger: Ledger) -> List[Transfer]:
    """
    Compute settling transfers for every user in the ledger.
    Each transfer is annotated with the names of the expenses the creditor
    paid for and the debtor took part in.
    """
    balances = [(uid, quantize_money(user.balance)) for uid, user in ledger.balances.items()]
    transfers = minimize_transfers(balances)
    for transfer in transfers:
        transfer.related_expenses = ledger.related_expense_names(transfer.from_user_id, transfer.to_user_id)
    return transfers
