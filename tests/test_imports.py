def test_imports():
    import citation_chat
    import citation_chat.cli
    import citation_chat.config
    import citation_chat.logging
    import citation_chat.ui
    import citation_chat.gateway.normalizer
    import citation_chat.gateway.answering_client
    import citation_chat.gateway.suggestions_client
    import citation_chat.services.conversation_store
    import citation_chat.services.chat_service
    import citation_chat.services.selection_bridge
    import citation_chat.services.citation_presenter
    import citation_chat.services.health_service

    assert citation_chat.__version__
