from fastapi import HTTPException, status


def http_error(error: ValueError) -> HTTPException:
    """Business-rule violation as 400, missing record as 404"""
    if "tidak ditemukan" in str(error):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
