class AppError(Exception):
    exit_code: int = 1
    log_message: str = "Ошибка приложения"


class DownloadFileError(AppError):
    log_message = "Ошибка при загрузке файла с сервера релизов"


class DownloadDirError(AppError):
    log_message = "Ошибка при чтении каталога на сервере релизов"


class VersionFileError(AppError):
    log_message = "Некорректный файл версии current/version.txt"


class ConfigError(AppError):
    exit_code = 2
    log_message = "Ошибка в конфигурации"


class LocalFileAccessError(AppError, OSError):
    log_message = "Ошибка доступа к локальным файлам/каталогам"


class UserAbend(AppError):
    exit_code = 130
    log_message = "Пользователь прекратил работу"


class ConfigLoadError(Exception):
    """
    Ошибка загрузки/разбора/валидации конфигурации.

    Используется как единый тип исключения для внешнего слоя приложения.
    """

    exit_code: int = 2
