# Services package init
"""
Animal Rescue API — Services Layer
===================================

What:  Everything between the HTTP routes and the database handle.

Service Inventory:
    - codec.py:             JSON body ↔ Animal (decode_animal, encode)
    - animal_repository.py: AnimalRepository, the persistence gateway
    - responses.py:         Success outcome + build_response
    - dispatcher.py:        RequestDispatcher, method/id routing

Call order for one request:
    dispatcher → codec.decode_animal → repository → responses.build_response
"""
