"""
Expense management routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from tripsplit.db.session import get_db
from tripsplit.models.expense import Expense
from tripsplit.schemas.expense import ExpenseCreate, ExpenseResponse, ExpenseUpdate
from tripsplit.services import expense_service

router = APIRouter(prefix="/trips", tags=["expenses"])


def build_expense_response(expense: Expense) -> ExpenseResponse:
    """Build response with payer name and participant ids."""
    return ExpenseResponse(
        id=expense.id,
        trip_id=expense.trip_id,
        description=expense.description or "",
        amount=expense.amount,
        payer_id=expense.payer_id,
        payer_name=expense.payer.name,
        category=expense.category,
        participant_ids=expense.participant_ids,
        created_at=expense.created_at,
        updated_at=expense.updated_at
    )


@router.get("/{trip_id}/expenses", response_model=List[ExpenseResponse])
async def list_expenses(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """List all expenses of a trip."""
    expenses = expense_service.list_expenses(trip_id, db)
    return [build_expense_response(e) for e in expenses]


@router.post("/{trip_id}/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    trip_id: int,
    expense_data: ExpenseCreate,
    db: Session = Depends(get_db)
):
    """Create a new expense split equally among participants."""
    expense = expense_service.create_expense_with_participants(
        trip_id=trip_id,
        payer_id=expense_data.payer_id,
        amount=expense_data.amount,
        participant_ids=expense_data.participant_ids,
        description=expense_data.description,
        category=expense_data.category,
        db=db
    )
    return build_expense_response(expense)


@router.put("/{trip_id}/expenses/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    trip_id: int,
    expense_id: int,
    expense_data: ExpenseUpdate,
    db: Session = Depends(get_db)
):
    """Update an expense."""
    expense = expense_service.update_expense(
        trip_id,
        expense_id,
        db,
        amount=expense_data.amount,
        payer_id=expense_data.payer_id,
        participant_ids=expense_data.participant_ids,
        description=expense_data.description,
        category=expense_data.category
    )
    return build_expense_response(expense)


@router.delete("/{trip_id}/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    trip_id: int,
    expense_id: int,
    db: Session = Depends(get_db)
):
    """Delete an expense."""
    expense_service.delete_expense(trip_id, expense_id, db)
