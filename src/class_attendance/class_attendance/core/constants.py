"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ALLOWED_UPLOAD_EXTENSIONS = (".xlsx", ".xls", ".csv")
DEFAULT_MAX_UPLOAD_MB = 10

DNI_DIGITS = 8
PHONE_DIGITS = 9

EXPORT_TITLE = "RESUMEN DE ASISTENCIA - UNIVERSIDAD TECNOLÓGICA DEL PERÚ"
STUDENTS_SHEET_NAME = "Lista de Estudiantes"
SUMMARY_SHEET_NAME = "Resumen"
