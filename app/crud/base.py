from typing import Generic, TypeVar, Type, Optional, List, Any, Dict
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from pydantic import BaseModel
from app.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Generic CRUD class with tenant isolation via explicit tenant_id.

    Every read and write includes ``tenant_id`` in its filter predicate.
    Tenant ID always comes from the caller's UserContext, never from
    request data.

    Type Parameters:
        ModelType: SQLAlchemy model class (must have ``id`` and ``tenant_id``)
        CreateSchemaType: Pydantic schema for creating records
        UpdateSchemaType: Pydantic schema for updating records
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: int, tenant_id: int) -> Optional[ModelType]:
        """
        Retrieve a single record by ID with tenant filtering.

        Returns:
            Model instance, or None if it does not exist or belongs to
            another tenant (the two cases are indistinguishable)
        """
        stmt = select(self.model).where(
            self.model.id == id,
            self.model.tenant_id == tenant_id
        )
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_multi(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 100,
        tenant_id: int
    ) -> List[ModelType]:
        """Retrieve records belonging to a tenant, oldest first."""
        stmt = select(self.model).where(
            self.model.tenant_id == tenant_id
        ).order_by(self.model.id).offset(skip).limit(limit)
        result = db.execute(stmt)
        return list(result.scalars().all())

    def count(self, db: Session, *, tenant_id: int) -> int:
        """Count records belonging to a tenant."""
        stmt = select(func.count()).select_from(self.model).where(
            self.model.tenant_id == tenant_id
        )
        return db.execute(stmt).scalar_one()

    def create(
        self,
        db: Session,
        *,
        obj_in: CreateSchemaType | Dict[str, Any],
        tenant_id: int,
        commit: bool = True
    ) -> ModelType:
        """
        Create a new record with tenant association.

        Args:
            db: Database session
            obj_in: Pydantic schema or dict with creation data
            tenant_id: Tenant ID for isolation
            commit: Commit immediately, or only flush so the caller can
                commit several writes together

        Returns:
            Created model instance
        """
        if isinstance(obj_in, dict):
            obj_data = dict(obj_in)
        else:
            obj_data = obj_in.model_dump()
        db_obj = self.model(tenant_id=tenant_id, **obj_data)
        db.add(db_obj)
        if commit:
            db.commit()
            db.refresh(db_obj)
        else:
            db.flush()
        return db_obj

    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | Dict[str, Any]
    ) -> ModelType:
        """
        Update an existing record.

        Note: This method assumes the db_obj was already retrieved using
        get() or similar method, which ensures tenant isolation.
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, id: int, tenant_id: int) -> Optional[ModelType]:
        """
        Delete a record by ID with tenant filtering.

        Returns:
            Deleted model instance or None if not found in the tenant
        """
        obj = self.get(db=db, id=id, tenant_id=tenant_id)
        if obj:
            db.delete(obj)
            db.commit()
        return obj
