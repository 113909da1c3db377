from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import the models so they are registered with Base
from clinica.models import (  # noqa: E402,F401
    user,
    client,
    client_package,
    session_record,
    payment,
    appointment,
)
