"""
MariaDB 서비스 DB 공통 Declarative Base
"""
from sqlalchemy.orm import declarative_base

MariaBase = declarative_base()
