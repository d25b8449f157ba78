# Терминальная панель репетитора
