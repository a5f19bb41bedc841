LOG_SOURCE = "kp_case_matcher"

# Etiqueta con la que se muestra el caso anónimo (register() sin nombre)
DEFAULT_CASE_LABEL = "<default>"
