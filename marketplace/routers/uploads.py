from contextlib import contextmanager

from fastapi import HTTPException, status

from ..core.exceptions import EmptyInputError, StorageWriteError


@contextmanager
def upload_errors():
    try:
        yield
    except EmptyInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StorageWriteError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Image could not be stored") from exc
