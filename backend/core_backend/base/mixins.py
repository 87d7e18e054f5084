class OptimizedQuerysetMixin:
    """
    Applies the joins a serializer declares on its Meta to the viewset's
    queryset, so list endpoints do not issue one query per row::

        class Meta:
            select_related_fields = ["table", "staff"]
            prefetch_related_fields = ["items__menu_item"]
    """

    def get_queryset(self):
        queryset = super().get_queryset()
        meta = getattr(self.get_serializer_class(), "Meta", None)

        select_related = getattr(meta, "select_related_fields", None)
        if select_related:
            queryset = queryset.select_related(*select_related)

        prefetch_related = getattr(meta, "prefetch_related_fields", None)
        if prefetch_related:
            queryset = queryset.prefetch_related(*prefetch_related)

        return queryset
