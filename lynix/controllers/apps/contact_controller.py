"""
Contact Controller - The caller's personal address book
"""
from fastapi import APIRouter, HTTPException, Depends, status
from typing import List
from lynix.schemas.apps import ContactRequest, ContactResponse
from lynix.services.contact_service import (
    get_contacts,
    create_contact,
    update_contact,
    delete_contact,
)
from lynix.utils.dependencies import get_current_user_id

router = APIRouter(prefix="/api/apps/contacts", tags=["Contacts"])


@router.get("", response_model=List[ContactResponse])
async def get_my_contacts(user_id: str = Depends(get_current_user_id)):
    """Get all contacts for current user, ordered by name"""
    return await get_contacts(user_id)


@router.post("", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_new_contact(
    request: ContactRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Create a new contact"""
    try:
        return await create_contact(
            user_id=user_id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            notes=request.notes
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact_info(
    contact_id: int,
    request: ContactRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Replace contact information"""
    try:
        updated_contact = await update_contact(
            contact_id=contact_id,
            user_id=user_id,
            name=request.name,
            email=request.email,
            phone=request.phone,
            notes=request.notes
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if not updated_contact:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found"
        )

    return updated_contact


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact_endpoint(
    contact_id: int,
    user_id: str = Depends(get_current_user_id)
):
    """Delete a contact"""
    success = await delete_contact(contact_id, user_id)

    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Contact not found"
        )
