class AppStatusCode:
    # Success
    DATA_RETRIEVED_SUCCESSFULLY = "100"
    OPERATION_SUCCESSFUL = "101"

    # Client errors
    INVALID_INPUT = "200"
    INSUFFICIENT_STOCK = "202"
    NOT_FOUND = "203"
    CONCURRENT_MODIFICATION = "204"

    # Auth
    AUTHENTICATION_TOKEN_INVALID = "300"
    AUTHENTICATION_TOKEN_EXPIRED = "301"

    # Server
    OPERATION_FAILED = "400"
    PERSISTENCE_ERROR = "402"
