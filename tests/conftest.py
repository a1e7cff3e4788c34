"""
Shared fixtures: sample DDL scripts and a Flask test client.
"""
import pytest

from ddl_to_er.web_app.app import create_app
from ddl_to_er.web_app.app_config import TestingConfig


SHOP_DDL = """
-- 用户表
CREATE TABLE Users (
    ID int IDENTITY(1,1) PRIMARY KEY,
    Name varchar(100) NOT NULL,
    Email varchar(255) UNIQUE,
    CreatedAt datetime DEFAULT GETDATE()
);

/* 订单表 */
CREATE TABLE Orders (
    OrderID int PRIMARY KEY,
    UserID int NOT NULL,
    Total decimal(10,2) DEFAULT 0,
    Status varchar(20) DEFAULT 'new, unpaid' NOT NULL,
    CONSTRAINT FK_Orders_Users FOREIGN KEY (UserID) REFERENCES Users(ID) ON DELETE CASCADE,
    CHECK (Total >= 0)
);

CREATE TABLE UserProfiles (
    ProfileID int PRIMARY KEY,
    UserID int UNIQUE REFERENCES Users(ID),
    Bio text
);

CREATE INDEX IX_Users_Email ON Users(Email);
CREATE UNIQUE INDEX UX_Orders_User_Status ON Orders(UserID, Status DESC);
"""


@pytest.fixture
def shop_ddl():
    return SHOP_DDL


@pytest.fixture
def sql_file(tmp_path):
    path = tmp_path / "shop.sql"
    path.write_text(SHOP_DDL, encoding="utf-8")
    return path


@pytest.fixture
def app():
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()
