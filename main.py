from fastapi import FastAPI, Depends
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy import Column, Integer, String
import random
from faker import Faker
from sql_datatables import (
    DataTables,
    DataTablesConfig,
    DataTablesRequest,
    DataTablesResponse,
    SQLAlchemyBackend,
)
from pydantic import BaseModel

# ----------------------
# Database setup
# ----------------------
DATABASE_URL = "sqlite+aiosqlite:///./students.db"

engine = create_async_engine(DATABASE_URL, echo=False, future=True)
async_session = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

Base = declarative_base()


async def get_db():
    async with async_session() as session:
        yield session


# ----------------------
# Models
# ----------------------
class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    age = Column(Integer, nullable=False)
    email = Column(String, nullable=False, unique=True)


class StudentSchema(BaseModel):
    id: int
    name: str
    age: int
    email: str


# SQLite understands the MySQL "LIMIT start, length" form.
STUDENTS_TABLE = DataTablesConfig(
    table_name="students",
    search_columns=["name", "email"],
    dialect="mysql",
)

# ----------------------
# FastAPI app
# ----------------------
app = FastAPI()
faker = Faker()


# ----------------------
# Create tables on startup
# ----------------------
@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ----------------------
# Insert 1000 random students
# ----------------------
@app.get("/insert_students")
async def insert_students():
    async with async_session() as session:
        students = [
            Student(
                name=faker.name(),
                age=random.randint(18, 25),
                email=faker.unique.email(),
            )
            for _ in range(1000)
        ]
        session.add_all(students)
        await session.commit()
    return {"message": "1000 random students inserted successfully!"}


# ----------------------
# Server-side processing endpoint
# ----------------------
# draw is echoed only when the client sends it as a string (the DataTables
# form-encoded default). JSON clients must post draw as a string, e.g.
# ajax.data = d => JSON.stringify({...d, draw: String(d.draw)}), otherwise
# the response carries draw 0 and the client drops it as stale.
@app.post("/students", response_model=DataTablesResponse[list[StudentSchema]])
async def get_students(
    datatable_request: DataTablesRequest, db: AsyncSession = Depends(get_db)
):
    datatable = DataTables(STUDENTS_TABLE, SQLAlchemyBackend(db))
    return await datatable.process(datatable_request)
